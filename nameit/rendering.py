"""Rendering engine: turns a parsed template and one file into a name."""

from __future__ import annotations

import logging

from nameit.chooser import DEFAULT_MAX_DISPLAY, ValueChooser
from nameit.errors import ValidationError
from nameit.history import History
from nameit.parameters import RenderContext, resolve_special
from nameit.templating import SpecialParameter, Template, Variable, parse_template

logger = logging.getLogger(__name__)


def normalize_spaces(name: str) -> str:
    """Replace spaces with hyphens so names are shell friendly."""
    return name.replace(" ", "-")


def resolve_variable(
    name: str,
    history: History,
    chooser: ValueChooser,
    *,
    repeat_last: bool = False,
    max_choices: int = DEFAULT_MAX_DISPLAY,
) -> str:
    """Resolve one free variable against history, prompting when needed."""
    entries = history.values.get(name)
    if entries:
        if repeat_last:
            logger.debug("Reusing last value for %s", name)
            return entries[0]
        return chooser.choose(name, entries, max_display=max_choices)

    history.variables.add(name)
    seeded: list[str] = []
    value = chooser.choose(name, seeded, max_display=max_choices)
    history.values[name] = seeded
    logger.info("Recorded first value for new variable %s", name)
    return value


def render_parts(
    template: Template,
    history: History,
    ctx: RenderContext,
    chooser: ValueChooser,
    *,
    repeat_last: bool = False,
    max_choices: int = DEFAULT_MAX_DISPLAY,
) -> list[str]:
    """Render each template part in order.

    Special parameters never touch history. Variables mutate ``history`` in
    place: chosen values are promoted and new variables are registered.
    """
    rendered: list[str] = []
    for part in template:
        if isinstance(part, Variable):
            rendered.append(
                resolve_variable(part.name, history, chooser, repeat_last=repeat_last, max_choices=max_choices)
            )
        elif isinstance(part, SpecialParameter):
            rendered.append(resolve_special(part.spec, ctx))
        else:
            rendered.append(part.text)
    return rendered


def render_name(
    template: Template,
    history: History,
    ctx: RenderContext,
    chooser: ValueChooser,
    *,
    repeat_last: bool = False,
    max_choices: int = DEFAULT_MAX_DISPLAY,
) -> str:
    """Render and join a template into a normalized filename stem."""
    parts = render_parts(template, history, ctx, chooser, repeat_last=repeat_last, max_choices=max_choices)
    return normalize_spaces("".join(parts))


def choose_format(
    history: History,
    chooser: ValueChooser,
    *,
    cli_format: str | None = None,
    repeat_last: bool = False,
    max_choices: int = DEFAULT_MAX_DISPLAY,
) -> str:
    """Pick the template string for this run.

    A format given on the command line is used as-is and is not recorded.
    """
    if cli_format is not None:
        return cli_format
    if repeat_last:
        if not history.formats:
            raise ValidationError(
                what="no previous format to repeat.",
                why="--last reuses the most recent format but the history has none",
                remediation="pass --format or run once without --last",
            )
        return history.formats[0]
    return chooser.choose("Format", history.formats, max_display=max_choices)


def edit_history(history: History, chooser: ValueChooser, *, max_choices: int = DEFAULT_MAX_DISPLAY) -> list[str]:
    """Interactively filter saved formats and values.

    Returns the names of variables that no remaining format references.
    Variables whose value list ends up empty are dropped entirely.
    """
    chooser.choose("Formats", history.formats, filter_mode=True, max_display=max_choices)

    referenced: set[str] = set()
    for source in history.formats:
        try:
            template = parse_template(source)
        except ValidationError as exc:
            logger.warning("Skipping unreadable saved format '%s': %s", source, exc.what)
            continue
        referenced.update(template.variables())

    orphans: list[str] = []
    kept: dict[str, list[str]] = {}
    for name, entries in history.values.items():
        if name not in referenced:
            logger.warning("%s variable doesn't appear in any formats", name)
            orphans.append(name)
        chooser.choose(name, entries, filter_mode=True, max_display=max_choices)
        if entries:
            kept[name] = entries

    history.values = kept
    history.variables = set(kept)
    return orphans
