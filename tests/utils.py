import os

from lexer import Lexer
from parser import Parser, parse_program
from interpreter import run

EXAMPLES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "examples")


def lex(text: str):
    """Return a list of tokens for the given source text."""
    return Lexer(text).tokenize()


def parse_text(text: str):
    """Convenience: lex+parse a source text into an unresolved Program."""
    return Parser(Lexer(text).tokenize()).parse()


def run_text(text: str, **options):
    """Parse, resolve and run a source text, returning its value."""
    return run(parse_program(text), **options)


def read_example(name: str) -> str:
    with open(os.path.join(EXAMPLES_DIR, name), encoding="utf-8") as fh:
        return fh.read()
