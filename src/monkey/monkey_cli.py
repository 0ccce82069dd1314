"""
Monkey CLI Entrypoint.

Runs the Monkey front end over a `.monkey` file or an inline string and
prints what it produced.

Features:
    - Read source from `.monkey` files or inline strings.
    - Dump the token stream, the canonical render, or the AST as JSON.
    - Choose the `let`/`return` grammar variant.
    - Report parse diagnostics on stderr and via the exit status.

Example usage:
    monkey program.monkey
    monkey -s "let x = 1 + 2 * 3;"
    monkey -s "a + b" --json
    monkey -s "let x = 5;" --tokens
    monkey prog.monkey -g minimal --verbose

Environment:
    MONKEY_GRAMMAR: default for `--grammar` ("minimal" or "full").

Functions:
    run_monkey(source: str, is_string: bool = False, grammar: str = "full",
               tokens: bool = False, as_json: bool = False) -> int:
        Scans and parses the source, prints the result, returns the exit status.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and invokes `run_monkey`.
"""

import argparse
import json
import logging
import os
import sys

from monkey.monkey_lexer import CharacterStream, Lexer
from monkey.monkey_parser import DEFAULT_GRAMMAR, GRAMMARS, Parser

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".monkey"


def run_monkey(
    source: str,
    is_string: bool = False,
    grammar: str = DEFAULT_GRAMMAR,
    tokens: bool = False,
    as_json: bool = False,
) -> int:
    """
    Run the Monkey front end: scan, parse, and print the result.

    Args:
        source (str): Monkey source code or path to a `.monkey` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        grammar (str): Grammar variant, "minimal" or "full".
        tokens (bool): If True, print the token stream and stop before parsing.
        as_json (bool): If True, print the AST as JSON instead of its canonical render.

    Returns:
        int: 0 on success, 1 if the parser recorded diagnostics.

    Raises:
        ValueError: If `is_string` is False and the source does not end with `.monkey`,
            or if `grammar` is unknown.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIX):
        raise ValueError(f"Only {SOURCE_SUFFIX} files are supported.")
    if not is_string:
        logger.debug("reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    lexer = Lexer(CharacterStream(source))

    if tokens:
        for tok in lexer:
            print(f"{tok.type.name:<10} {tok.literal!r}")
        return 0

    parser = Parser(lexer, grammar=grammar)
    program = parser.parse_program()
    errors = parser.errors
    logger.info(
        "parsed %d statement(s) with %d error(s)", len(program.statements), len(errors)
    )

    if as_json:
        print(json.dumps(program.to_dict(), indent=2))
    else:
        print(program.render())

    for msg in errors:
        print(f"error: {msg}", file=sys.stderr)
    return 1 if errors else 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Monkey CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-g`, `--grammar`: Grammar variant ('minimal' or 'full').
        - `--tokens`: Print the token stream instead of parsing.
        - `--json`: Print the AST as JSON.
        - `--verbose`: Enable debug logging.
    """
    parser = argparse.ArgumentParser(prog="monkey")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-g",
        "--grammar",
        choices=GRAMMARS,
        default=os.environ.get("MONKEY_GRAMMAR", DEFAULT_GRAMMAR),
        help="let/return grammar variant (default: $MONKEY_GRAMMAR or full)",
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print tokens instead of the AST"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the AST as JSON"
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return run_monkey(
            source=args.source,
            is_string=args.string,
            grammar=args.grammar,
            tokens=args.tokens,
            as_json=args.as_json,
        )
    except (ValueError, OSError) as e:
        logger.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
