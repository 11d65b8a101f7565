"""Naming template tokenizer and part types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Sequence, Union

from nameit.errors import TemplateSyntaxError, UnrecognizedParameterError

DELIMITER = "_"
VARIABLE_OPEN = "{"
VARIABLE_CLOSE = "}"
LITERAL_QUOTE = '"'

INDEX_MARKER = "#"
STEM_MARKER = "?"
DATE_SIGIL = "%"
GROUP_MARKER = "*"
SPECIAL_SIGILS = frozenset({INDEX_MARKER, STEM_MARKER, DATE_SIGIL, GROUP_MARKER})


class ParameterKind(str, Enum):
    """Kinds of special parameter, in resolution priority order."""

    INDEX = "index"
    STEM = "stem"
    DATE = "date"
    GROUPS = "groups"


@dataclass(frozen=True, slots=True)
class Literal:
    """Fixed text written between literal quotes."""

    text: str


@dataclass(frozen=True, slots=True)
class Delimiter:
    """Structural separator kept verbatim."""

    text: str = DELIMITER


@dataclass(frozen=True, slots=True)
class Variable:
    """Free slot resolved from history or interactive entry."""

    name: str

    @property
    def text(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class SpecialParameter:
    """Slot computed from the file context, never from history."""

    spec: str
    kind: ParameterKind

    @property
    def text(self) -> str:
        return self.spec


Part = Union[Literal, Delimiter, Variable, SpecialParameter]


@dataclass(frozen=True, slots=True)
class Template:
    """Parsed naming template: ordered parts plus the source they came from."""

    source: str
    parts: tuple[Part, ...]

    def __iter__(self) -> Iterator[Part]:
        return iter(self.parts)

    def __len__(self) -> int:
        return len(self.parts)

    def variables(self) -> list[str]:
        """Return variable names in first-appearance order without repeats."""
        names: list[str] = []
        for part in self.parts:
            if isinstance(part, Variable) and part.name not in names:
                names.append(part.name)
        return names

    def source_text(self) -> str:
        """Join part text; equals ``source`` minus the consumed marker characters."""
        return "".join(part.text for part in self.parts)


def _is_index(spec: str) -> bool:
    return set(spec) == {INDEX_MARKER}


def _is_stem(spec: str) -> bool:
    return spec == STEM_MARKER


def _is_date(spec: str) -> bool:
    return spec.startswith(DATE_SIGIL)


def _is_groups(spec: str) -> bool:
    return set(spec) == {GROUP_MARKER}


_SPECIAL_RULES: tuple[tuple[ParameterKind, Callable[[str], bool]], ...] = (
    (ParameterKind.INDEX, _is_index),
    (ParameterKind.STEM, _is_stem),
    (ParameterKind.DATE, _is_date),
    (ParameterKind.GROUPS, _is_groups),
)


def is_special(name: str) -> bool:
    """Return whether a slot name uses special parameter syntax."""
    return bool(name) and name[0] in SPECIAL_SIGILS


def classify_special(spec: str) -> ParameterKind:
    """Classify a special parameter spec using the fixed rule priority."""
    for kind, matches in _SPECIAL_RULES:
        if spec and matches(spec):
            return kind
    raise UnrecognizedParameterError(
        what=f"unrecognized special parameter '{spec}'.",
        why="special parameters must be a run of '#', exactly '?', a '%' date format or a run of '*'",
        remediation="fix the parameter or wrap plain text in double quotes",
    )


def parse_template(source: str) -> Template:
    """Tokenize a raw naming template into typed parts.

    Bare runs and ``{...}`` bodies become variables, ``"..."`` bodies become
    literals and ``_`` outside markers is a delimiter. Variables that start
    with a special sigil are then reclassified into special parameters.
    """
    candidates: list[Part] = []
    start = 0
    marker: str | None = None

    for position, char in enumerate(source):
        if marker == VARIABLE_OPEN:
            if char == VARIABLE_OPEN:
                raise _syntax_error(source, position, f"unexpected '{VARIABLE_OPEN}' inside a variable marker")
            if char == VARIABLE_CLOSE:
                body = source[start:position]
                if not body:
                    raise _syntax_error(source, position, "empty variable marker")
                candidates.append(Variable(body))
                start = position + 1
                marker = None
            continue

        if marker == LITERAL_QUOTE:
            if char == LITERAL_QUOTE:
                body = source[start:position]
                if not body:
                    raise _syntax_error(source, position, "empty literal marker")
                candidates.append(Literal(body))
                start = position + 1
                marker = None
            continue

        if char == VARIABLE_CLOSE:
            raise _syntax_error(source, position, f"unexpected '{VARIABLE_CLOSE}' without an opening marker")
        if char in (VARIABLE_OPEN, LITERAL_QUOTE, DELIMITER):
            if position > start:
                candidates.append(Variable(source[start:position]))
            if char == DELIMITER:
                candidates.append(Delimiter(char))
            else:
                marker = char
            start = position + 1

    if marker is not None:
        raise _syntax_error(source, len(source), f"unclosed '{marker}' marker")
    if start < len(source):
        candidates.append(Variable(source[start:]))

    try:
        parts = tuple(_reclassify(part) for part in candidates)
    except UnrecognizedParameterError as exc:
        raise UnrecognizedParameterError(
            what=f"invalid format '{source}': {exc.what}",
            why=exc.why,
            remediation=exc.remediation,
        ) from exc
    return Template(source=source, parts=parts)


def describe_template(template: Template, rendered: Sequence[str] | None = None) -> str:
    """Render a one-line view of a template, optionally with resolved values.

    Variables are shown as ``<value>`` and special parameters as ``[value]``
    so resolved names stay aligned with the parts that produced them.
    """
    values = list(rendered) if rendered is not None else [part.text for part in template.parts]
    pieces: list[str] = []
    for part, value in zip(template.parts, values):
        if isinstance(part, Variable):
            pieces.append(f"<{value}>")
        elif isinstance(part, SpecialParameter):
            pieces.append(f"[{value}]")
        else:
            pieces.append(value)
    return "".join(pieces)


def _reclassify(part: Part) -> Part:
    if isinstance(part, Variable) and is_special(part.name):
        return SpecialParameter(spec=part.name, kind=classify_special(part.name))
    return part


def _syntax_error(source: str, position: int, problem: str) -> TemplateSyntaxError:
    return TemplateSyntaxError(
        what=f"invalid format '{source}': {problem} at position {position}.",
        why="'{' '}' and '\"' markers must be balanced and non-empty",
        remediation="close every marker exactly once, for example '{name}_{###}'",
    )
