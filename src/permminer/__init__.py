"""permminer - permission evidence mining and guard-gap location for Android APIs."""

__version__ = "0.1.0"
