from __future__ import annotations
import json
import logging
import sys
from typing import List, Optional

from lexer import Lexer
from tokens import Token
from ast_nodes import Program
from parser import Parser
from resolver import Resolver
from environment import Environment
from errors import EvaluationError
from interpreter import run, OVERFLOW_POLICIES
from pretty_printer import PrettyPrinter
from ast_json import program_to_json
from tree_viz import write_and_render

logger = logging.getLogger(__name__)


def lex(text: str) -> List[Token]:
    """Tokenize input string."""
    lexer = Lexer(text)
    return lexer.tokenize()


def parse_tokens(tokens: List[Token]) -> Program:
    """Parse tokens into a Program (not yet resolved)."""
    parser = Parser(tokens)
    return parser.parse()


def process_program(
    text: str,
    *,
    print_tokens: bool = False,
    print_ast: bool = False,
    print_env: bool = False,
    dump_json_path: Optional[str] = None,
    viz_path: Optional[str] = None,
    viz_format: str = "svg",
    word_bits: int = 64,
    overflow: str = "checked",
    max_call_depth: Optional[int] = None,
) -> Optional[int]:
    """Process a single program: lex, parse, resolve, evaluate and print the result.

    Flags control which intermediate stages are printed. Returns the program's
    value, or None when any stage failed (the error is printed).
    """
    try:
        tokens = lex(text)
        if print_tokens:
            print(f"Tokens ({len(tokens)}):")
            for i, token in enumerate(tokens[:50]):
                print(f"  {i:3}: {token}")
            if len(tokens) > 50:
                print(f"  ... and {len(tokens) - 50} more")

        program = parse_tokens(tokens)
        Resolver.check_program(program, word_bits=word_bits)
        logger.info(
            "parsed program with %d function(s): %s",
            len(program.functions),
            ", ".join(program.functions) or "-",
        )

        if print_ast:
            print("\nAST:")
            for fdef in program.functions.values():
                print(PrettyPrinter.print_function(fdef))
            print(PrettyPrinter.print_ast(program.root))

        if dump_json_path:
            try:
                with open(dump_json_path, "w", encoding="utf-8") as fh:
                    json.dump(program_to_json(program), fh, indent=2)
                print(f"Wrote program JSON to {dump_json_path}")
            except OSError as e:
                print(f"Failed to write program JSON to {dump_json_path}: {e}")

        if viz_path:
            try:
                write_and_render(program, viz_path, fmt=viz_format)
                print(f"Wrote tree visualization to {viz_path}.{viz_format}")
            except Exception as e:
                # graphviz raises ExecutableNotFound when `dot` is missing
                print(f"Failed to render tree visualization to {viz_path}: {e}")

        env = Environment()
        result = run(
            program,
            word_bits=word_bits,
            overflow=overflow,
            max_call_depth=max_call_depth,
            env=env,
        )
        if print_env:
            print(f"\nEnvironment: {env}")
        print(result)
        return result

    except SyntaxError as e:
        print(f"Syntax Error: {e}")
    except EvaluationError as e:
        print(f"Runtime Error: {type(e).__name__}: {e}")
    except ValueError as e:
        print(f"Configuration Error: {e}")
    except Exception as e:
        print(f"Unexpected error: {e}")
        import traceback

        traceback.print_exc()
    return None


def interactive_mode(**options) -> None:
    """Run an interactive REPL reading one program per line from stdin."""
    print("\nInteractive mode (type 'quit' to exit)")
    print("=" * 80)

    while True:
        try:
            text = input("\nops> ").strip()
            if text.lower() in ("quit", "exit", "q"):
                print("Goodbye!")
                break

            if not text:
                continue

            process_program(text, **options)

        except (KeyboardInterrupt, EOFError):
            print("\n\nExiting...")
            break


def cli(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description="Run an opslang program from a file or interactively from stdin"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("file", nargs="?", help="Path to source file to run")
    group.add_argument(
        "--interactive",
        "-i",
        dest="interactive",
        action="store_true",
        help="Start interactive REPL mode",
    )
    parser.add_argument(
        "--print-tokens", dest="print_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument(
        "--print-ast", dest="print_ast", action="store_true", help="Print the program tree"
    )
    parser.add_argument(
        "--print-env",
        dest="print_env",
        action="store_true",
        help="Print the root environment after the run",
    )
    parser.add_argument(
        "--dump-json", dest="dump_json", help="Path to write the program tree as JSON"
    )
    parser.add_argument(
        "--viz-tree",
        dest="viz_tree",
        help="Path (without extension) to write a Graphviz rendering of the tree",
    )
    parser.add_argument(
        "--viz-format",
        dest="viz_format",
        default="svg",
        help="Format for Graphviz output (svg, png, pdf, etc)",
    )
    # evaluation options
    parser.add_argument(
        "--word-bits",
        dest="word_bits",
        type=int,
        default=64,
        help="Integer width in bits (default: 64)",
    )
    parser.add_argument(
        "--overflow",
        dest="overflow",
        choices=list(OVERFLOW_POLICIES),
        default="checked",
        help="Fail on integer overflow (checked) or wrap around (wrap)",
    )
    parser.add_argument(
        "--max-depth",
        dest="max_depth",
        type=int,
        default=None,
        help="Maximum nesting of function calls",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log evaluation details"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = dict(
        print_tokens=args.print_tokens,
        print_ast=args.print_ast,
        print_env=args.print_env,
        word_bits=args.word_bits,
        overflow=args.overflow,
        max_call_depth=args.max_depth,
    )

    if args.interactive or not args.file:
        interactive_mode(**options)
        return 0

    try:
        with open(args.file, "r", encoding="utf-8") as fh:
            text = fh.read()
    except OSError as e:
        print(f"Failed to read file {args.file}: {e}")
        return 1

    result = process_program(
        text,
        dump_json_path=args.dump_json,
        viz_path=args.viz_tree,
        viz_format=args.viz_format,
        **options,
    )
    return 0 if result is not None else 1


if __name__ == "__main__":
    sys.exit(cli())
