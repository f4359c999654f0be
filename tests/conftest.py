"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides small Java sources shared across the test packages.
"""

import sys
from pathlib import Path

import pytest

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from permminer.codemodel import CodeModel, JavaModelBuilder  # noqa: E402
from permminer.mining.vocabulary import PermissionVocabulary  # noqa: E402

CAMERA_SOURCE = """\
package android.hardware;

import android.net.Uri;
import java.util.List;

/**
 * The Camera class is used to set image capture settings.
 * <p>To access the device camera, you must declare the
 * {@link android.Manifest.permission#CAMERA} permission in your manifest.
 */
public class Camera {
    /**
     * Creates a new Camera object.
     * Requires {@link android.Manifest.permission#CAMERA} permission.
     */
    public static Camera open(int cameraId) {
        return null;
    }

    /**
     * Reconnects, needs CAMERA too.
     * @hide
     */
    public void reconnect() {
    }

    /** Uses CAMERA but is not public. */
    void unlock() {
    }

    /** Content uri, callers need READ_CONTACTS. */
    public static final Uri CONTENT_URI = null;

    /** Private uri. */
    private static final Uri PRIVATE_URI = null;

    public static final String ACTION_NEW_PICTURE = "android.hardware.action.NEW_PICTURE";

    public <T> void setList(List<T> items, String... names) {
        int a = 1;
        a++;
    }

    public Camera() {
    }

    public static class Parameters {
        /** Public uri of the parameters. */
        public static final Uri PARAMS_URI = null;

        /** Needs the RECORD_AUDIO permission. */
        public void set(String key, int value) {
        }
    }
}
"""

ACTIVITY_SOURCE = """\
package com.example;

public class MainActivity {
    public void onClick(android.view.View v) {
        android.hardware.Camera c = android.hardware.Camera.open(0);
        int x = 1;
        c.startPreview();
    }

    public void onResume() {
        int y = 2;
    }
}
"""

CAMERA_PATH = Path("android/hardware/Camera.java")
ACTIVITY_PATH = Path("com/example/MainActivity.java")


def build_model(*sources: tuple[Path, str]) -> CodeModel:
    return JavaModelBuilder().build_from_sources((path, text.encode("utf-8")) for path, text in sources)


@pytest.fixture
def camera_model() -> CodeModel:
    """Code model of a trimmed android.hardware.Camera."""
    return build_model((CAMERA_PATH, CAMERA_SOURCE))


@pytest.fixture
def activity_model() -> CodeModel:
    """Code model of an app activity with one callback."""
    return build_model((ACTIVITY_PATH, ACTIVITY_SOURCE))


@pytest.fixture
def vocabulary() -> PermissionVocabulary:
    """Three-permission vocabulary with the CAMERA regex."""
    return PermissionVocabulary.from_mappings(
        words={
            "android.permission.CAMERA": "CAMERA",
            "android.permission.READ_CONTACTS": "READ_CONTACTS",
            "android.permission.RECORD_AUDIO": "RECORD_AUDIO",
        },
        regex={"android.permission.CAMERA": "[^_]CAMERA[^_]"},
        class_exclusions=["android.app.AppOpsManager"],
    )
