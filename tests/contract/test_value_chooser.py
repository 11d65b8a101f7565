"""Contract tests shared by value chooser implementations."""

from __future__ import annotations

import io

import pytest

from nameit.chooser import TerminalChooser, ValueChooser


def _scripted_terminal(answers: list[str]) -> TerminalChooser:
    pending = list(answers)
    return TerminalChooser(input_func=lambda prompt: pending.pop(0), output=io.StringIO(), errors=io.StringIO())


@pytest.fixture
def make_chooser():
    """Build a chooser that answers from a script."""
    return _scripted_terminal


@pytest.mark.contract
def test_selection_returns_front_of_candidates(make_chooser) -> None:
    chooser: ValueChooser = make_chooser(["3"])
    candidates = ["a", "b", "c"]

    value = chooser.choose("name", candidates)

    assert candidates[0] == value == "c"
    assert sorted(candidates) == ["a", "b", "c"]


@pytest.mark.contract
def test_manual_entry_is_seeded_as_only_candidate(make_chooser) -> None:
    chooser: ValueChooser = make_chooser(["beach"])
    candidates: list[str] = []

    assert chooser.choose("name", candidates) == "beach"
    assert candidates == ["beach"]


@pytest.mark.contract
def test_filter_mode_returns_expression_and_preserves_order(make_chooser) -> None:
    chooser: ValueChooser = make_chooser(["3,1"])
    candidates = ["a", "b", "c"]

    assert chooser.choose("name", candidates, filter_mode=True) == "3,1"
    assert candidates == ["a", "c"]


@pytest.mark.contract
def test_default_answers_pick_most_recent_and_keep_all(make_chooser) -> None:
    chooser: ValueChooser = make_chooser(["", ""])
    values = ["x", "y"]

    assert chooser.choose("name", values) == "x"
    assert chooser.choose("name", values, filter_mode=True) == "1-2"
    assert values == ["x", "y"]
