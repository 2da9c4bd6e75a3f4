from __future__ import annotations
import argparse
import json
import logging
import subprocess
import sys
from typing import Iterable, List, Optional
from lexer import Lexer
from tokens import Token
from ast_nodes import Program
from parser import MAX_DEPTH_LIMIT, MAX_NESTING_DEPTH, Parser
from pretty_printer import PrettyPrinter
from ast_json import ast_to_json
from ast_viz import write_and_render
from graphviz import ExecutableNotFound

logger = logging.getLogger(__name__)


def lex(text: str) -> List[Token]:
    """Tokenize input string."""
    lexer = Lexer(text)
    return lexer.tokenize()


def parse_tokens(
    tokens: Iterable[Token], max_depth: int = MAX_NESTING_DEPTH
) -> Program:
    """Parse tokens into AST."""
    parser = Parser(tokens, max_depth=max_depth)
    return parser.parse()


def parse_source(text: str, max_depth: int = MAX_NESTING_DEPTH) -> Program:
    """Lex and parse source text into a Program."""
    return parse_tokens(Lexer(text), max_depth=max_depth)


def process_program(
    text: str,
    *,
    print_tokens: bool = False,
    print_ast: bool = True,
    print_json: bool = False,
    dump_ast_path: Optional[str] = None,
    viz_path: Optional[str] = None,
    viz_format: str = "svg",
    recover: bool = False,
    max_depth: int = MAX_NESTING_DEPTH,
) -> bool:
    """Process a single program: lex, parse and optionally print stages.

    Returns True when the program lexed and parsed without errors. Flags
    control which parts are printed.
    """
    try:
        tokens = lex(text)
        if print_tokens:
            print(f"Tokens ({len(tokens)}):")
            for i, token in enumerate(tokens[:50]):
                print(f"  {i:3}: {token.line}:{token.column} {token}")
            if len(tokens) > 50:
                print(f"  ... and {len(tokens) - 50} more")

        parser = Parser(tokens, max_depth=max_depth)
        if recover:
            result = parser.parse_recovering()
            for error in result.errors:
                print(f"Syntax Error: {error}")
            ast = result.program
            ok = result.ok
        else:
            ast = parser.parse()
            ok = True
    except SyntaxError as e:
        print(f"Syntax Error: {e}")
        return False

    if print_ast:
        print("\nAST:")
        print(PrettyPrinter.print_ast(ast))

    if print_json or dump_ast_path:
        try:
            json_text = json.dumps(ast_to_json(ast), indent=2)
        except RecursionError:
            # the json module recurses once per nested dict
            print("Failed to encode AST as JSON: the tree is nested too deeply")
            return False

    if print_json:
        print(json_text)

    if dump_ast_path:
        try:
            with open(dump_ast_path, "w", encoding="utf-8") as fh:
                fh.write(json_text)
            print(f"Wrote AST JSON to {dump_ast_path}")
        except OSError as e:
            print(f"Failed to write AST JSON to {dump_ast_path}: {e}")
            ok = False

    # Optionally render visualization via Graphviz
    if viz_path:
        try:
            write_and_render(ast, viz_path, fmt=viz_format)
            print(f"Wrote AST visualization to {viz_path}.{viz_format}")
        except (ExecutableNotFound, subprocess.CalledProcessError, OSError) as e:
            logger.debug("Graphviz render failed", exc_info=True)
            print(f"Failed to render AST visualization to {viz_path}: {e}")
            ok = False

    return ok


def interactive_mode(
    print_tokens: bool = False,
    print_ast: bool = True,
    print_json: bool = False,
    recover: bool = False,
    max_depth: int = MAX_NESTING_DEPTH,
) -> None:
    """Run interactive REPL reading programs from stdin."""
    print("\nInteractive Parser Mode (type 'quit' to exit)")
    print("=" * 80)

    while True:
        try:
            text = input("\nEnter program: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\n\nExiting...")
            break

        if text.lower() in ("quit", "exit", "q"):
            print("Goodbye!")
            break

        if not text:
            continue

        process_program(
            text,
            print_tokens=print_tokens,
            print_ast=print_ast,
            print_json=print_json,
            recover=recover,
            max_depth=max_depth,
        )


def depth_limit(text: str) -> int:
    """argparse type for --max-depth."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {text!r}")
    if not 0 < value <= MAX_DEPTH_LIMIT:
        raise argparse.ArgumentTypeError(
            f"must be between 1 and {MAX_DEPTH_LIMIT}, got {value}"
        )
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Tokenize and parse a script file or interactive input"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--file", "-f", dest="file", help="Path to source file to process"
    )
    group.add_argument(
        "--interactive",
        "-i",
        dest="interactive",
        action="store_true",
        help="Start interactive REPL mode",
    )
    # printing/verbosity options
    parser.add_argument(
        "--print-tokens", dest="print_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument(
        "--no-ast", dest="print_ast", action="store_false", help="Do not print AST"
    )
    parser.add_argument(
        "--json", dest="print_json", action="store_true", help="Print the AST as JSON"
    )
    parser.add_argument(
        "--dump-ast", dest="dump_ast", help="Path to write the AST as JSON"
    )
    parser.add_argument(
        "--viz-ast",
        dest="viz_ast",
        help="Path (without extension) to write Graphviz visualization of the AST",
    )
    parser.add_argument(
        "--viz-format",
        dest="viz_format",
        default="svg",
        help="Format for Graphviz output (svg, png, pdf, etc)",
    )
    # parsing options
    parser.add_argument(
        "--recover",
        dest="recover",
        action="store_true",
        help="Keep parsing after an error and report every parse error",
    )
    parser.add_argument(
        "--max-depth",
        dest="max_depth",
        type=depth_limit,
        default=MAX_NESTING_DEPTH,
        help=f"Maximum syntactic nesting depth (1-{MAX_DEPTH_LIMIT})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        dest="verbose",
        action="store_true",
        help="Enable debug logging",
    )

    # default behavior: print the AST only
    parser.set_defaults(print_tokens=False, print_ast=True, print_json=False)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.interactive:
        interactive_mode(
            print_tokens=args.print_tokens,
            print_ast=args.print_ast,
            print_json=args.print_json,
            recover=args.recover,
            max_depth=args.max_depth,
        )
        return 0

    if not args.file:
        parser.print_help()
        return 0

    try:
        with open(args.file, "r", encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Failed to read file {args.file}: {e}")
        return 1

    ok = process_program(
        text,
        print_tokens=args.print_tokens,
        print_ast=args.print_ast,
        print_json=args.print_json,
        dump_ast_path=args.dump_ast,
        viz_path=args.viz_ast,
        viz_format=args.viz_format,
        recover=args.recover,
        max_depth=args.max_depth,
    )
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
