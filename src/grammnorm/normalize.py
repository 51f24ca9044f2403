"""Normalize a grammar document for a deterministic parser generator:
expand macros, drop unreachable and redundant productions, remove
left recursion and factor out common prefixes.
"""

from grammnorm import loader, pipeline, settings
from grammnorm.errors import AggregateGrammarError, GrammarError

import argparse
import sys

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


PASSES = {
    "transform": pipeline.auto_transform,
    "clean": pipeline.recursive_auto_clean,
    "fix": pipeline.recursive_auto_fix,
    "lr1": pipeline.auto_transform_lr1,
}


def cli():
    """Command line interface for grammar normalization"""
    parser = argparse.ArgumentParser("Normalize grammar")
    parser.add_argument("original", type=argparse.FileType('r'),
                        nargs="?", default=sys.stdin,
                        help="Grammar document (YAML)")
    parser.add_argument("transformed", type=argparse.FileType('w'),
                        nargs="?", default=sys.stdout,
                        help="Normalized grammar")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--clean", dest="mode", action="store_const", const="clean",
                      help="Only clean: macros, unreachable, unit and duplicate productions")
    mode.add_argument("--fix", dest="mode", action="store_const", const="fix",
                      help="Only fix: left recursion and common prefixes")
    mode.add_argument("--lr1", dest="mode", action="store_const", const="lr1",
                      help="Prepare for an LR(1) parser: macros and start augmentation")
    parser.set_defaults(mode="transform")
    parser.add_argument("--records", action="store_true",
                        help="Print the transformation records to stderr")
    parser.add_argument("--ebnf", action="store_true",
                        help="Write EBNF text instead of a YAML document")
    parser.add_argument("--settings", type=argparse.FileType('r'),
                        help="Settings file (YAML)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log every rewrite")
    return parser.parse_args()


def main() -> int:
    args = cli()
    if args.verbose:
        for name in logging.root.manager.loggerDict:
            if name.startswith("grammnorm"):
                logging.getLogger(name).setLevel(logging.DEBUG)
    try:
        opts = settings.load(args.settings) if args.settings else settings.Settings()
    except GrammarError as e:
        log.error(f"Cannot read settings: {e}")
        return 1

    try:
        productions = loader.load(args.original)
    except GrammarError as e:
        log.error(f"Cannot read grammar: {e}")
        return 1
    log.debug(f"Read {len(productions)} productions, start symbol {productions.start}")

    try:
        records = PASSES[args.mode](productions, opts)
    except AggregateGrammarError as e:
        for diagnostic in e.diagnostics:
            print(diagnostic, file=sys.stderr)
        return 1
    except GrammarError as e:
        log.error(f"{e}")
        return 1

    if args.records:
        for record in records:
            print(record, file=sys.stderr)
    if args.ebnf:
        print(productions.to_ebnf(), file=args.transformed)
    else:
        print(loader.dump(productions), file=args.transformed, end="")
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
