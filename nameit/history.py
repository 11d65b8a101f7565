"""Persisted history of formats and variable values."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from nameit.errors import HistoryError

_HISTORY_FILENAME = "histories.json"
_APP_DIRECTORY = "nameit"

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class History:
    """Most-recent-first logs of formats and per-variable values."""

    formats: list[str] = field(default_factory=list)
    variables: set[str] = field(default_factory=set)
    values: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the on-disk document shape."""
        return {
            "formats": list(self.formats),
            "variables": sorted(self.variables),
            "values": {name: list(entries) for name, entries in self.values.items()},
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> History:
        """Build a history from a decoded document, validating its shape."""
        formats = raw.get("formats", [])
        variables = raw.get("variables", [])
        values = raw.get("values", {})
        if not _is_string_list(formats) or not _is_string_list(variables):
            raise ValueError("'formats' and 'variables' must be lists of strings")
        if not isinstance(values, Mapping) or not all(
            isinstance(name, str) and _is_string_list(entries) for name, entries in values.items()
        ):
            raise ValueError("'values' must map variable names to lists of strings")
        return cls(
            formats=list(formats),
            variables=set(variables),
            values={name: list(entries) for name, entries in values.items()},
        )


def promote(entries: list[str], index: int) -> str:
    """Move ``entries[index]`` to the front in place and return it.

    Other occurrences of the same value are left where they are.
    """
    value = entries.pop(index)
    entries.insert(0, value)
    return value


def default_history_path() -> Path:
    """Resolve the history file location from the environment."""
    explicit = os.environ.get("NAMEIT_HISTORY")
    if explicit:
        return Path(explicit).expanduser()
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home).expanduser() if data_home else Path.home() / ".local" / "share"
    return base / _APP_DIRECTORY / _HISTORY_FILENAME


class HistoryStore:
    """JSON file backed load/save for :class:`History`."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> History:
        """Load history; a missing file yields an empty history."""
        try:
            content = self.path.read_bytes()
        except FileNotFoundError:
            logger.debug("No history at %s; starting empty", self.path)
            return History()
        except OSError as exc:
            raise HistoryError(
                what=f"cannot read history file: {self.path}",
                why=str(exc),
                remediation="fix the file permissions or point --history to another file",
            ) from exc

        try:
            raw = json.loads(content.decode("utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("history document must be a JSON object")
            history = History.from_dict(raw)
        except ValueError as exc:
            raise HistoryError(
                what=f"history file is malformed: {self.path}",
                why=str(exc),
                remediation="repair the JSON document or move it aside to start a fresh history",
            ) from exc

        logger.debug(
            "Loaded history from %s (%d formats, %d variables)",
            self.path,
            len(history.formats),
            len(history.values),
        )
        return history

    def save(self, history: History) -> None:
        """Write history as a UTF-8 JSON document, creating parent directories."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(history.to_dict(), indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise HistoryError(
                what=f"cannot save history file: {self.path}",
                why=str(exc),
                remediation="make the history directory writable or point --history elsewhere",
            ) from exc
        logger.debug("Saved history to %s", self.path)

    def ensure_writable(self) -> None:
        """Fail before any rename when history could not be saved later."""
        directory = self.path.parent
        while not directory.exists() and directory != directory.parent:
            directory = directory.parent
        target = self.path if self.path.exists() else directory
        if not os.access(target, os.W_OK):
            raise HistoryError(
                what=f"history location is not writable: {target}",
                why="learned values would be lost after the run",
                remediation="make the location writable or point --history elsewhere",
            )


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)
