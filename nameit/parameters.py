"""Deterministic substitution for special template parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from nameit.templating import DELIMITER, ParameterKind, classify_special


@dataclass(frozen=True, slots=True)
class RenderContext:
    """Per-file inputs available to special parameters."""

    original_stem: str
    sequence_index: int = 1
    now: datetime = field(default_factory=datetime.now)


def resolve_special(spec: str, ctx: RenderContext) -> str:
    """Compute the substitution for a special parameter spec.

    Index markers zero pad the 1-based sequence index to the marker length
    (a minimum width, never a truncation), ``?`` keeps the original stem, a
    ``%`` spec is a strftime format for ``ctx.now`` and a run of ``*`` keeps
    the first N delimiter groups of the stem.
    """
    kind = classify_special(spec)
    if kind is ParameterKind.INDEX:
        return f"{ctx.sequence_index:0{len(spec)}d}"
    if kind is ParameterKind.STEM:
        return ctx.original_stem
    if kind is ParameterKind.DATE:
        return ctx.now.strftime(spec)
    return DELIMITER.join(ctx.original_stem.split(DELIMITER)[: len(spec)])
