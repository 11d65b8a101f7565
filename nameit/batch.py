"""Batch planning and per-file execution with a failure policy."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from nameit.errors import FileOperationError, format_user_error

ALLOWED_FAILURE_POLICIES = {"stop", "continue"}


@dataclass(frozen=True, slots=True)
class RenameJob:
    """One input file with its 1-based position in the batch."""

    index: int
    source: Path

    @property
    def stem(self) -> str:
        return self.source.stem

    @property
    def extension(self) -> str:
        return self.source.suffix


@dataclass(frozen=True, slots=True)
class RenameFailure:
    """Failure metadata for a single file."""

    job: RenameJob
    error: Exception


@dataclass(slots=True)
class BatchResult:
    """Outcome of processing every job under a failure policy."""

    successes: list[tuple[RenameJob, str]]
    failures: list[RenameFailure]
    aborted_early: bool


def plan_batch(paths: Sequence[str | Path]) -> list[RenameJob]:
    """Assign deterministic 1-based sequence indexes to input paths."""
    return [RenameJob(index=position, source=Path(path)) for position, path in enumerate(paths, 1)]


def execute_batch(
    *,
    jobs: list[RenameJob],
    process: Callable[[RenameJob], str],
    on_failure: str = "continue",
) -> BatchResult:
    """Run ``process`` for each job, collecting file operation failures.

    Only file-level errors are collected; template, history and other errors
    propagate and end the run.
    """
    if on_failure not in ALLOWED_FAILURE_POLICIES:
        options = ", ".join(sorted(ALLOWED_FAILURE_POLICIES))
        raise ValueError(
            format_user_error(
                what=f"on_failure must be one of: {options}.",
                why="unsupported failure handling policy was provided",
                how_to_fix=f"choose one of {options}",
            )
        )

    successes: list[tuple[RenameJob, str]] = []
    failures: list[RenameFailure] = []

    for job in jobs:
        try:
            outcome = process(job)
            successes.append((job, outcome))
        except (FileOperationError, OSError) as exc:
            failures.append(RenameFailure(job=job, error=exc))
            if on_failure == "stop":
                return BatchResult(successes=successes, failures=failures, aborted_early=True)

    return BatchResult(successes=successes, failures=failures, aborted_early=False)
