"""Command-line interface: python -m wordhunt."""

from __future__ import annotations

import argparse
import logging
import sys

from ._codec import read_session, write_session
from ._errors import WordhuntError
from ._exclusions import load_excluded_words
from ._export import export_words
from ._sentence import DEFAULT_LOCALE
from ._streamer import FileStreamer
from ._types import Classification
from ._view import EnrichedSessionState, SortOrder, WordFilter

_CLASS_CHOICES = [c.value for c in Classification]


def _cmd_analyse(args: argparse.Namespace) -> int:
    streamer = FileStreamer(locale=args.locale)
    state = streamer.create_or_open_session(args.path, strict=args.strict)
    progress = state.progress()
    print(f"{state.name}: {progress.total} words, {progress.classified} classified "
          f"({progress.known} known, {progress.unknown} unknown, {progress.starred} starred)")
    if args.save:
        write_session(state, args.save)
        print(f"Saved session to {args.save}")
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    state = read_session(args.session)
    classes = [Classification(c) for c in (args.classes or ["unknown"])]
    n = export_words(state, args.output, classes, with_counts=args.counts)
    print(f"Exported {n} words to {args.output}")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    state = read_session(args.session)
    classes = frozenset(Classification(c) for c in args.classes) if args.classes else None
    view = EnrichedSessionState(
        state,
        search_text=args.search,
        active_filter=WordFilter(
            classifications=classes,
            excluded=load_excluded_words(args.exclude or ()),
        ),
        sort_order=SortOrder(args.sort),
    )
    get = state.classifications.get
    for use in view.view()[: args.limit]:
        classification = get(use.word, Classification.UNCLASSIFIED)
        print(f"{use.word.display}\t{use.count}\t{classification.value}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordhunt", description=__doc__)
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("analyse", help="open a session or analyse a document")
    p.add_argument("path")
    p.add_argument("--locale", default=DEFAULT_LOCALE)
    p.add_argument("--save", help="write the session to this path")
    p.add_argument("--strict", action="store_true",
                   help="fail on damaged session files instead of re-analysing")
    p.set_defaults(func=_cmd_analyse)

    p = sub.add_parser("export", help="export classified words as text")
    p.add_argument("session")
    p.add_argument("output")
    p.add_argument("--class", dest="classes", action="append", choices=_CLASS_CHOICES)
    p.add_argument("--counts", action="store_true", help="append occurrence counts")
    p.set_defaults(func=_cmd_export)

    p = sub.add_parser("show", help="list the words of a session")
    p.add_argument("session")
    p.add_argument("--search")
    p.add_argument("--class", dest="classes", action="append", choices=_CLASS_CHOICES)
    p.add_argument("--sort", default=SortOrder.APPEARANCE.value,
                   choices=[s.value for s in SortOrder])
    p.add_argument("--limit", type=int, default=None)
    p.add_argument("--exclude", action="append", metavar="FILE",
                   help="hide words known in this session or listed in this file")
    p.set_defaults(func=_cmd_show)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(message)s")
    try:
        return args.func(args)
    except WordhuntError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
