"""nameit command line entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from nameit.batch import RenameJob, execute_batch, plan_batch
from nameit.chooser import TerminalChooser, ValueChooser
from nameit.config import AppConfig, default_config, load_config_file, merge_typed_config
from nameit.errors import (
    ExitCode,
    NameitError,
    ValidationError,
    format_user_error,
    parse_user_error_message,
)
from nameit.fileops import FileOperations, LocalFileOperations, apply_action, build_destination, validate_source_path
from nameit.history import History, HistoryStore, default_history_path
from nameit.parameters import RenderContext
from nameit.rendering import choose_format, edit_history, normalize_spaces, render_parts
from nameit.templating import describe_template, parse_template

_VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser for the rename command."""
    parser = argparse.ArgumentParser(prog="nameit", description="Interactively rename files from a naming template.")
    parser.add_argument("paths", nargs="*", help="Files to rename; '#' runs in the format become their 1-based index")
    parser.add_argument(
        "-f",
        "--format",
        help="Naming format; formats given here are not saved in history (asks interactively when omitted)",
    )
    parser.add_argument("-d", "--destination", help="Directory to place renamed files in instead of their own")
    parser.add_argument(
        "-l",
        "--last",
        action="store_true",
        help="Reuse the most recent format and values without prompting",
    )
    parser.add_argument("-R", "--replace", action="store_true", help="Replace existing files without asking")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("-r", "--rename", action="store_true", help="Rename instead of copying (same volume only)")
    action.add_argument("-m", "--move", action="store_true", help="Move instead of copying (copy then delete)")
    parser.add_argument("-e", "--edit", action="store_true", help="Interactively filter saved formats and values")
    parser.add_argument("-t", "--test", action="store_true", help="Print the new filenames and do nothing")
    parser.add_argument("-c", "--choices", type=int, help="Number of history choices to show (default 20)")
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument("--history", help="Path to the history JSON file")
    parser.add_argument("--verbose", action="store_true", help="Enable INFO logging")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging")
    parser.add_argument("--version", action="store_true", help="Print nameit version and exit")
    return parser


def _configure_logging(*, debug: bool, verbose: bool) -> None:
    """Configure global logging level based on CLI flags."""
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)


def _emit_progress(*, event: str, detail: str) -> None:
    """Emit friendly human-readable progress events."""
    print(f"progress: {event} - {detail}")


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate CLI flags into a sectioned override mapping."""
    action = None
    if args.rename:
        action = "rename"
    elif args.move:
        action = "move"
    return {
        "history": {"path": args.history},
        "prompt": {"max_choices": args.choices},
        "files": {
            "action": action,
            "replace": True if args.replace else None,
            "destination": args.destination,
        },
    }


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    yaml_config = load_config_file(args.config) if args.config else {}
    return merge_typed_config(defaults=default_config(), yaml_config=yaml_config, cli_args=_cli_overrides(args))


def _confirm_replace(target: Path) -> bool:
    """Ask before overwriting an existing file."""
    answer = input(f"warning: {target} already exists, replace <y/N>? ")
    return answer.strip().lower() == "y"


def _run_edit(*, history: History, store: HistoryStore, chooser: ValueChooser, config: AppConfig) -> int:
    """Filter saved formats and values, then persist the result."""
    edit_history(history, chooser, max_choices=config.prompt.max_choices)
    store.save(history)
    _emit_progress(event="saved", detail=f"history saved to {store.path}")
    return int(ExitCode.OK)


def _run_batch(
    *,
    args: argparse.Namespace,
    config: AppConfig,
    history: History,
    store: HistoryStore,
    chooser: ValueChooser,
    ops: FileOperations,
) -> int:
    """Resolve the template once, then render and apply it to every path."""
    logger = logging.getLogger(__name__)
    max_choices = config.prompt.max_choices
    if not args.test:
        store.ensure_writable()

    source = choose_format(
        history,
        chooser,
        cli_format=args.format,
        repeat_last=args.last,
        max_choices=max_choices,
    )
    template = parse_template(source)
    if not template.parts:
        raise ValidationError(
            what="format is empty.",
            why="an empty format cannot produce a filename",
            remediation="enter a format such as '{name}_{###}'",
        )
    store.save(history)
    print(f"Template: {describe_template(template)}")

    action = config.files.action

    def _process(job: RenameJob) -> str:
        path = validate_source_path(job.source)
        print(f"File: {path}")
        ctx = RenderContext(original_stem=job.stem, sequence_index=job.index)
        parts = render_parts(template, history, ctx, chooser, repeat_last=args.last, max_choices=max_choices)
        store.save(history)

        target = build_destination(path, normalize_spaces("".join(parts)), config.files.destination)
        shown = target.with_name(normalize_spaces(describe_template(template, parts)) + target.suffix)
        print(f"{action.capitalize()}: {path} -> {shown}")
        return apply_action(
            action,
            path,
            target,
            ops,
            replace=config.files.replace,
            test=args.test,
            confirm=_confirm_replace,
        )

    result = execute_batch(jobs=plan_batch(args.paths), process=_process, on_failure=config.files.on_failure)
    for failure in result.failures:
        logger.debug("Failed %s: %r", failure.job.source, failure.error)
        print(str(failure.error), file=sys.stderr)
    if result.aborted_early:
        print("stopped after the first failed file (files.on_failure: stop)", file=sys.stderr)

    if result.failures:
        return int(ExitCode.FILE_OPERATION)
    return int(ExitCode.OK)


def main(argv: list[str] | None = None) -> int:
    """Run CLI command and return process status code."""
    raw_argv = argv if argv is not None else sys.argv[1:]
    if "--version" in raw_argv:
        print(f"nameit {_VERSION}")
        return int(ExitCode.OK)

    parser = build_parser()
    args = parser.parse_args(raw_argv)
    _configure_logging(debug=args.debug, verbose=args.verbose)

    try:
        config = _resolve_config(args)
        store = HistoryStore(config.history.path or default_history_path())
        history = store.load()
        chooser = TerminalChooser()

        if args.edit:
            return _run_edit(history=history, store=store, chooser=chooser, config=config)
        if not args.paths:
            return int(ExitCode.OK)
        return _run_batch(
            args=args,
            config=config,
            history=history,
            store=store,
            chooser=chooser,
            ops=LocalFileOperations(),
        )
    except NameitError as exc:
        print(str(exc), file=sys.stderr)
        return int(exc.exit_code)
    except ValueError as exc:
        parsed = parse_user_error_message(str(exc))
        if parsed is not None:
            what, why, remediation = parsed
            structured = ValidationError(what=what, why=why, remediation=remediation)
            print(str(structured), file=sys.stderr)
            return int(structured.exit_code)
        print(
            str(
                ValidationError(
                    what="invalid runtime input.",
                    why=str(exc),
                    remediation="review your inputs/config and try again",
                )
            ),
            file=sys.stderr,
        )
        return int(ExitCode.VALIDATION)
    except (KeyboardInterrupt, EOFError):
        print("\ninterrupted", file=sys.stderr)
        return int(ExitCode.INTERRUPTED)
    except Exception as exc:  # pragma: no cover - defensive guard
        print(
            format_user_error(
                what="unexpected runtime failure.",
                why=str(exc),
                how_to_fix="inspect stack trace and re-run with validated inputs",
            ),
            file=sys.stderr,
        )
        return int(ExitCode.INTERNAL)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
