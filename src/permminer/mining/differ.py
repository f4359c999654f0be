"""Compute the publishable delta of mined definitions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from permminer.mining.models import DefinitionSet, PermissionDefinition, TargetKind


@dataclass(frozen=True)
class DiffResult:
    delta: DefinitionSet
    final: DefinitionSet


def drop_covered_classes(mined: DefinitionSet, covered: Iterable[str]) -> DefinitionSet:
    """Remove class-kind definitions for classes an override already announces."""
    names = frozenset(covered)
    return mined.filter(lambda d: not (d.target_kind is TargetKind.CLASS and d.class_name in names))


def diff_definitions(
    mined: DefinitionSet,
    baseline: Iterable[PermissionDefinition],
    excluded: Iterable[PermissionDefinition],
    overrides: Iterable[PermissionDefinition] = (),
    covered_classes: Iterable[str] = (),
) -> DiffResult:
    """``delta = mined - covered - baseline - excluded``; ``final = delta + overrides``.

    Override definitions are added back even when the baseline already
    holds them. Pure: same inputs, same result.
    """
    delta = drop_covered_classes(mined, covered_classes).difference(baseline).difference(excluded)
    extra = DefinitionSet(overrides).difference(delta)
    return DiffResult(delta=delta, final=delta.union(extra))
