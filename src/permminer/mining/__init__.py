"""Evidence mining and permission definition synthesis."""

from permminer.mining.builder import DefinitionBuilder, cleanup_signature, process_inner_classes
from permminer.mining.collector import Evidence, EvidenceCollector, is_hidden
from permminer.mining.differ import DiffResult, diff_definitions
from permminer.mining.document import DefinitionDocument, load_definitions, read_document, write_document
from permminer.mining.intervals import merge_context_ranges
from permminer.mining.models import (
    DefinitionSet,
    ParametricSensDef,
    PermissionDefinition,
    PermissionRel,
    TargetKind,
)
from permminer.mining.ops import MiningOps, MiningResult
from permminer.mining.overrides import (
    CustomOverride,
    OverrideResolver,
    OverrideTables,
    ParametricSpec,
    load_overrides,
)
from permminer.mining.scanner import OccurrenceScanner
from permminer.mining.vocabulary import PermissionVocabulary, load_vocabulary

__all__ = [
    "DefinitionBuilder",
    "cleanup_signature",
    "process_inner_classes",
    "Evidence",
    "EvidenceCollector",
    "is_hidden",
    "DiffResult",
    "diff_definitions",
    "DefinitionDocument",
    "load_definitions",
    "read_document",
    "write_document",
    "merge_context_ranges",
    "DefinitionSet",
    "ParametricSensDef",
    "PermissionDefinition",
    "PermissionRel",
    "TargetKind",
    "MiningOps",
    "MiningResult",
    "CustomOverride",
    "OverrideResolver",
    "OverrideTables",
    "ParametricSpec",
    "load_overrides",
    "OccurrenceScanner",
    "PermissionVocabulary",
    "load_vocabulary",
]
