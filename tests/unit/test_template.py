"""Unit tests for naming template parsing."""

import pytest

from nameit.errors import TemplateSyntaxError, UnrecognizedParameterError
from nameit.templating import (
    Delimiter,
    Literal,
    ParameterKind,
    SpecialParameter,
    Variable,
    classify_special,
    describe_template,
    parse_template,
)


@pytest.mark.unit
def test_parse_braced_variable_and_index_marker() -> None:
    template = parse_template("{name}_{###}")

    assert template.parts == (
        Variable("name"),
        Delimiter("_"),
        SpecialParameter(spec="###", kind=ParameterKind.INDEX),
    )


@pytest.mark.unit
def test_parse_bare_runs_are_variables_unless_sigil_prefixed() -> None:
    template = parse_template("photo_##_%Y%m%d")

    assert template.parts == (
        Variable("photo"),
        Delimiter("_"),
        SpecialParameter(spec="##", kind=ParameterKind.INDEX),
        Delimiter("_"),
        SpecialParameter(spec="%Y%m%d", kind=ParameterKind.DATE),
    )


@pytest.mark.unit
def test_parse_quoted_text_is_literal_and_keeps_markers_verbatim() -> None:
    template = parse_template('"IMG_{raw}"_{?}_**')

    assert template.parts == (
        Literal("IMG_{raw}"),
        Delimiter("_"),
        SpecialParameter(spec="?", kind=ParameterKind.STEM),
        Delimiter("_"),
        SpecialParameter(spec="**", kind=ParameterKind.GROUPS),
    )


@pytest.mark.unit
def test_braces_allow_delimiters_inside_date_formats() -> None:
    template = parse_template("{%Y_%m}")
    assert template.parts == (SpecialParameter(spec="%Y_%m", kind=ParameterKind.DATE),)


@pytest.mark.unit
def test_consecutive_delimiters_and_adjacent_runs_are_kept_in_order() -> None:
    assert parse_template("a__b").parts == (Variable("a"), Delimiter("_"), Delimiter("_"), Variable("b"))
    assert parse_template("{a}b").parts == (Variable("a"), Variable("b"))


@pytest.mark.unit
def test_empty_template_has_no_parts() -> None:
    assert parse_template("").parts == ()


@pytest.mark.unit
@pytest.mark.parametrize(
    "source",
    [
        "{name}_{###}",
        "trip_{place}_%Y-%m-%d",
        '"IMG"_{?}_***',
        "__lead_and_trail__",
        '{a}"x_y"b_{#}',
    ],
)
def test_joined_part_text_reproduces_source_without_markers(source: str) -> None:
    template = parse_template(source)

    expected = source.replace("{", "").replace("}", "").replace('"', "")
    assert template.source_text() == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("source", "problem"),
    [
        ("{name", "unclosed '{'"),
        ("name}", "unexpected '}'"),
        ("{a{b}}", "unexpected '{'"),
        ("{}_x", "empty variable marker"),
        ('""', "empty literal marker"),
        ('"open', "unclosed '\"'"),
    ],
)
def test_unbalanced_or_empty_markers_are_parse_errors(source: str, problem: str) -> None:
    with pytest.raises(TemplateSyntaxError) as excinfo:
        parse_template(source)

    assert f"invalid format '{source}'" in excinfo.value.what
    assert problem in excinfo.value.what
    assert "how-to-fix" in str(excinfo.value)


@pytest.mark.unit
@pytest.mark.parametrize("source", ["#a", "{?x}", "x_*#", "{??}"])
def test_unknown_sigil_specs_fail_while_parsing(source: str) -> None:
    with pytest.raises(UnrecognizedParameterError, match=r"what: invalid format .*unrecognized special parameter"):
        parse_template(source)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("spec", "kind"),
    [
        ("#", ParameterKind.INDEX),
        ("####", ParameterKind.INDEX),
        ("?", ParameterKind.STEM),
        ("%d", ParameterKind.DATE),
        ("%#", ParameterKind.DATE),
        ("***", ParameterKind.GROUPS),
    ],
)
def test_classify_special_priority(spec: str, kind: ParameterKind) -> None:
    assert classify_special(spec) is kind


@pytest.mark.unit
def test_variables_lists_unique_names_in_order() -> None:
    assert parse_template("{b}_{a}_{b}_{###}").variables() == ["b", "a"]


@pytest.mark.unit
def test_describe_template_marks_variables_and_parameters() -> None:
    template = parse_template("{name}_{###}")

    assert describe_template(template) == "<name>_[###]"
    assert describe_template(template, ["beach", "_", "003"]) == "<beach>_[003]"
