"""Guard-gap location: map unguarded report lines onto source statements."""

from permminer.guard.matcher import GuardGapMatcher, StatementMatch, match_statements
from permminer.guard.models import GuardDiagnostic, GuardReportEntry, GuardStatement
from permminer.guard.ops import GuardOps
from permminer.guard.report import load_report
from permminer.guard.runner import AnalysisRunner, find_artifact, resolve_home

__all__ = [
    "GuardGapMatcher",
    "StatementMatch",
    "match_statements",
    "GuardDiagnostic",
    "GuardReportEntry",
    "GuardStatement",
    "GuardOps",
    "load_report",
    "AnalysisRunner",
    "find_artifact",
    "resolve_home",
]
