"""Unit tests for special parameter resolution."""

from datetime import datetime

import pytest

from nameit.errors import UnrecognizedParameterError
from nameit.parameters import RenderContext, resolve_special

_NOW = datetime(2024, 3, 5, 14, 7, 9)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("spec", "index", "expected"),
    [
        ("###", 3, "003"),
        ("##", 7, "07"),
        ("#", 12, "12"),
        ("###", 1234, "1234"),
    ],
)
def test_index_marker_zero_pads_to_minimum_width(spec: str, index: int, expected: str) -> None:
    rendered = resolve_special(spec, RenderContext(original_stem="img", sequence_index=index, now=_NOW))

    assert rendered == expected
    assert len(rendered) >= len(spec)
    assert int(rendered) == index


@pytest.mark.unit
@pytest.mark.parametrize("index", [1, 2, 99])
def test_stem_marker_keeps_original_stem(index: int) -> None:
    ctx = RenderContext(original_stem="vacation-photo", sequence_index=index, now=_NOW)
    assert resolve_special("?", ctx) == "vacation-photo"


@pytest.mark.unit
@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("%Y-%m-%d", "2024-03-05"),
        ("%H%M", "1407"),
        ("%Y_%m", "2024_03"),
    ],
)
def test_date_sigil_formats_current_time(spec: str, expected: str) -> None:
    assert resolve_special(spec, RenderContext(original_stem="x", now=_NOW)) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("spec", "stem", "expected"),
    [
        ("**", "a_b_c_d", "a_b"),
        ("*", "a_b_c_d", "a"),
        ("*****", "a_b", "a_b"),
        ("**", "plain", "plain"),
    ],
)
def test_group_marker_keeps_first_groups_of_stem(spec: str, stem: str, expected: str) -> None:
    assert resolve_special(spec, RenderContext(original_stem=stem, now=_NOW)) == expected


@pytest.mark.unit
def test_context_defaults_to_first_index_and_current_time() -> None:
    ctx = RenderContext(original_stem="x")

    assert ctx.sequence_index == 1
    assert isinstance(ctx.now, datetime)


@pytest.mark.unit
@pytest.mark.parametrize("spec", ["", "#x", "??", "name"])
def test_unrecognized_spec_is_a_contract_error(spec: str) -> None:
    with pytest.raises(UnrecognizedParameterError, match="unrecognized special parameter"):
        resolve_special(spec, RenderContext(original_stem="x", now=_NOW))
