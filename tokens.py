"""Token definitions for the lexer.

This module defines the `TokenType` enum for all token kinds recognized by
the lexer and a small `Token` dataclass that holds a token type, an optional
lexeme/value and the source position it was read from. Tokens are the atomic
units produced by the lexer and consumed by the parser.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    # Literals
    INTEGER = auto()
    IDENTIFIER = auto()

    # Arithmetic and bitwise operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    AMP = auto()
    PIPE = auto()

    # Grouping
    LPAREN = auto()
    RPAREN = auto()

    # Punctuation
    HASH = auto()
    COLON = auto()

    # Comparison operators
    EQ = auto()
    LT = auto()
    GT = auto()
    LTE = auto()
    GTE = auto()

    # Logical operators
    AND = auto()
    OR = auto()

    # Keywords
    FN = auto()
    SET = auto()
    IF = auto()
    RANGE = auto()

    # Special
    EOF = auto()

    def __str__(self) -> str:
        return self.name


@dataclass
class Token:
    type: TokenType
    value: Optional[str | int] = None
    line: int = 0
    column: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {repr(self.value)})"

    @property
    def lexeme(self) -> str:
        if self.value is None:
            return str(self.type)
        return str(self.value)
