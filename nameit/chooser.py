"""Value chooser contract and its interactive terminal implementation."""

from __future__ import annotations

import logging
import sys
from typing import Callable, Protocol, TextIO

from nameit.errors import InputError
from nameit.history import promote

DEFAULT_MAX_DISPLAY = 20
_NEW_ENTRY_LABEL = "<new entry>"

logger = logging.getLogger(__name__)


class ValueChooser(Protocol):
    """Contract for picking a value from most-recent-first candidates."""

    def choose(
        self,
        label: str,
        candidates: list[str],
        *,
        filter_mode: bool = False,
        max_display: int = DEFAULT_MAX_DISPLAY,
    ) -> str:
        """Return the chosen value, or the filter expression in filter mode.

        Selection mode promotes the chosen value to the front of
        ``candidates``; filter mode reduces ``candidates`` in place.
        """


def parse_choice(raw: str, upper: int) -> int:
    """Parse a selection-mode answer into an index in ``0..upper``.

    Empty input selects the most recent entry (1); 0 asks for a new entry.
    """
    text = raw.strip()
    if not text:
        return 1
    try:
        index = int(text)
    except ValueError as exc:
        raise InputError(f"'{text}' is not a number; enter 0 to {upper}") from exc
    if not 0 <= index <= upper:
        raise InputError(f"enter from 0 to {upper} only")
    return index


def parse_selection(expression: str, upper: int) -> set[int]:
    """Parse a filter expression like ``1-3,5`` into 1-based indices.

    Ranges may be open ended: ``-3`` starts at 1 and ``4-`` ends at ``upper``.
    ``0`` is accepted and selects nothing, so a list can be emptied.
    """
    selected: set[int] = set()
    for token in expression.split(","):
        item = token.strip()
        if not item:
            raise InputError(f"empty item in selection '{expression}'")
        if "-" in item:
            raw_start, raw_end = (bound.strip() for bound in item.split("-", 1))
            start = _parse_bound(raw_start, default=1, expression=expression)
            end = _parse_bound(raw_end, default=upper, expression=expression)
            if start > end:
                raise InputError(f"range '{item}' is reversed")
            indices: range | list[int] = range(start, end + 1)
        else:
            indices = [_parse_bound(item, default=None, expression=expression)]
        for index in indices:
            if not 0 <= index <= upper:
                raise InputError(f"{index} is outside 0-{upper}")
            if index:
                selected.add(index)
    return selected


def _parse_bound(raw: str, *, default: int | None, expression: str) -> int:
    if not raw and default is not None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise InputError(f"'{expression}' is not a list of numbers and ranges") from exc


class TerminalChooser:
    """Prompt on the terminal, re-asking until the answer parses."""

    def __init__(
        self,
        *,
        input_func: Callable[[str], str] | None = None,
        output: TextIO | None = None,
        errors: TextIO | None = None,
    ) -> None:
        self._input = input_func
        self._output = output
        self._errors = errors

    def choose(
        self,
        label: str,
        candidates: list[str],
        *,
        filter_mode: bool = False,
        max_display: int = DEFAULT_MAX_DISPLAY,
    ) -> str:
        if filter_mode:
            return self._filter(label, candidates, max_display)
        if not candidates:
            return self._manual_entry(label, candidates)

        self._show(label, candidates, max_display, offer_new_entry=True)
        while True:
            try:
                index = parse_choice(self._ask("Select <1>: "), len(candidates))
            except InputError as exc:
                self._report(exc)
                continue
            break

        if index == 0:
            return self._manual_entry(label, candidates)
        return promote(candidates, index - 1)

    def _filter(self, label: str, candidates: list[str], max_display: int) -> str:
        if not candidates:
            return "0"
        default = f"1-{len(candidates)}"
        self._show(label, candidates, max_display, offer_new_entry=False)
        while True:
            expression = self._ask(f"Select <{default}>: ").strip()
            if not expression:
                return default
            try:
                selected = parse_selection(expression, len(candidates))
            except InputError as exc:
                self._report(exc)
                continue
            break

        kept = [value for position, value in enumerate(candidates, 1) if position in selected]
        logger.debug("Filter '%s' kept %d of %d %s entries", expression, len(kept), len(candidates), label)
        candidates[:] = kept
        return expression

    def _manual_entry(self, label: str, candidates: list[str]) -> str:
        while True:
            value = self._ask(f"Input {label}: ").strip()
            if value:
                break
            self._report(InputError(f"{label} cannot be empty"))
        candidates.append(value)
        return promote(candidates, len(candidates) - 1)

    def _ask(self, prompt: str) -> str:
        reader = self._input or input
        return reader(prompt)

    def _show(self, label: str, candidates: list[str], max_display: int, *, offer_new_entry: bool) -> None:
        out = self._output or sys.stdout
        print(f"Choices for {label}:", file=out)
        if offer_new_entry:
            print(f"  [0] {_NEW_ENTRY_LABEL}", file=out)
        for position, value in enumerate(candidates[:max_display], 1):
            print(f"  [{position}] {value}", file=out)

    def _report(self, exc: InputError) -> None:
        print(f"error: {exc}", file=self._errors or sys.stderr)
