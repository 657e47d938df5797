import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .collector import DocumentSet
from .config import load_config
from .errors import EXIT_FAIL, EXIT_OK, SpellGateError
from .gate import SpellGate
from .report import check_report_path, render_json, render_text, suggestions, write_report

logger = logging.getLogger("spellgate")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="spellgate",
        description="Spell-check documentation sources and fail on words missing from the allow-list.",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("--root", help="project root (default: $SPELLGATE_ROOT or the current directory)")
    ap.add_argument("--config", help="YAML config file (default: <root>/spellgate.yaml when present)")
    ap.add_argument("--suffix", dest="suffixes", action="append", metavar="SUFFIX", help="document suffix, repeatable")
    ap.add_argument("--exclude", action="append", metavar="GLOB", help="relative path glob to skip, repeatable")
    ap.add_argument("--dictionary", help="language code, word-frequency file, or .dic/.aff pair base path")
    ap.add_argument("--allowlist", help="allow-list file, relative to the root")
    ap.add_argument("--min-length", type=int, help="shortest token to check")
    ap.add_argument("--no-strip-markup", dest="strip_markup", action="store_const", const=False,
                    help="check code blocks, URLs and tags as prose")
    ap.add_argument("--progress", action="store_true", help="show a progress bar on stderr")
    ap.add_argument("-v", "--verbose", action="count", default=0)

    sub = ap.add_subparsers(dest="command", metavar="COMMAND")
    chk = sub.add_parser("check", help="run the gate (default)")
    chk.add_argument("--format", choices=["text", "json"], default="text")
    chk.add_argument("--suggest", action="store_true", help="add corrections and near allow-list matches")
    chk.add_argument("--report", metavar="PATH", help="also write violations to a .csv or .xlsx file")
    sub.add_parser("regenerate", help="overwrite the allow-list with every currently flagged token")
    apr = sub.add_parser("approve", help="add tokens to the allow-list")
    apr.add_argument("tokens", nargs="+")
    sub.add_parser("prune", help="drop allow-list tokens no document produces any more")
    sub.add_parser("list", help="print the documents that would be checked")
    return ap


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING if verbosity <= 0 else logging.INFO if verbosity == 1 else logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    logging.getLogger("spellgate").setLevel(level)


def _check(gate: SpellGate, args) -> int:
    result = gate.check()
    hints = None
    if getattr(args, "suggest", False) and not result.passed:
        hints = suggestions(result, gate.checker, gate.load_allowlist())
    if getattr(args, "format", "text") == "json":
        print(render_json(result, hints))
    else:
        print(render_text(result, hints))
    report = getattr(args, "report", None)
    if report:
        write_report(result, report, hints)
        logger.info("report written to %s", report)
    return EXIT_OK if result.passed else EXIT_FAIL


def run(args) -> int:
    config = load_config(
        root=args.root,
        config_file=args.config,
        overrides={
            "suffixes": args.suffixes,
            "exclude": args.exclude,
            "dictionary": args.dictionary,
            "allowlist": args.allowlist,
            "min_length": args.min_length,
            "strip_markup": args.strip_markup,
        },
    )
    command = args.command or "check"
    if command == "check" and getattr(args, "report", None):
        check_report_path(args.report)

    if command == "list":
        for rel in DocumentSet(config.root, config.suffixes, config.exclude):
            print(rel)
        return EXIT_OK

    gate = SpellGate(config, progress=args.progress)
    if command == "check":
        return _check(gate, args)
    if command == "regenerate":
        allow = gate.regenerate()
        print(f"wrote {len(allow)} token(s) to {config.allowlist_path}")
    elif command == "approve":
        added = gate.approve(args.tokens)
        print(f"added {len(added)} token(s) to {config.allowlist_path}")
        for t in added:
            print(f"  {t}")
    elif command == "prune":
        removed = gate.prune()
        print(f"removed {len(removed)} token(s) from {config.allowlist_path}")
        for t in removed:
            print(f"  {t}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        return run(args)
    except SpellGateError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.code


if __name__ == "__main__":
    sys.exit(main())
