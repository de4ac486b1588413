"""
Lexer for the opslang surface syntax.

Overview:
- This module implements a small hand-written lexical analyzer (scanner) that
    transforms an input source string into a stream of `Token` objects defined
    in `tokens.py`.
- It recognizes the keywords `fn`, `set`, `if` and `range`, identifiers
    (function and parameter names), integer literals, the `#` variable marker,
    the `:` parameter separator, single- and two-character operators (`>=`,
    `<=`, `&&`, `||`), parentheses, and skips whitespace and comments starting
    with `;`.

Examples:
    Input:  "(set 1 (+ (#1) (-2)))"
    Tokens: [LPAREN, SET, INTEGER(1), LPAREN, PLUS, LPAREN, HASH, INTEGER(1), ...]

Implementation notes:
- The lexer is a simple stateful scanner using `self.pos` and `self.current_char`.
- Two-character operators are checked first to avoid splitting them.
- A `-` immediately followed by a digit is a negative integer literal;
    otherwise it is the subtraction operator.
"""

from __future__ import annotations
from typing import Optional, List
from tokens import Token, TokenType


class Lexer:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.current_char = self.text[self.pos] if self.text else None

        self.keywords = {
            "fn": TokenType.FN,
            "set": TokenType.SET,
            "if": TokenType.IF,
            "range": TokenType.RANGE,
        }

    def error(self, message: str = "") -> SyntaxError:
        msg = f"Lexical error at line {self.line}, column {self.column}: {message}"
        return SyntaxError(msg)

    def advance(self) -> None:
        """Advance to next character."""
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    @staticmethod
    def is_digit(ch: Optional[str]) -> bool:
        """ASCII digits only; `str.isdigit` also accepts characters like '²'."""
        return ch is not None and ch in "0123456789"

    def peek_char(self) -> Optional[str]:
        """Look at next character without consuming it."""
        next_pos = self.pos + 1
        if next_pos < len(self.text):
            return self.text[next_pos]
        return None

    def skip_whitespace(self) -> None:
        """Skip whitespace characters."""
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    def skip_comment(self) -> None:
        """Skip a `;` comment up to and including the end of the line."""
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

        if self.current_char == "\n":
            self.advance()

    def integer(self) -> int:
        """Parse a multi-digit integer, with an optional leading minus."""
        result = []

        if self.current_char == "-":
            result.append("-")
            self.advance()

        while self.current_char is not None and self.is_digit(self.current_char):
            result.append(self.current_char)
            self.advance()

        if not result or result == ["-"]:
            raise self.error("Expected integer")

        return int("".join(result))

    def identifier(self) -> str:
        """Parse an identifier or keyword."""
        result = []

        if self.current_char is not None and (
            self.current_char.isalpha() or self.current_char == "_"
        ):
            result.append(self.current_char)
            self.advance()
        else:
            raise self.error("Expected identifier")

        while self.current_char is not None and (
            self.current_char.isalnum() or self.current_char == "_"
        ):
            result.append(self.current_char)
            self.advance()

        return "".join(result)

    def _two_char(self, token_type: TokenType, lexeme: str, line: int, col: int) -> Token:
        self.advance()
        self.advance()
        return Token(token_type, lexeme, line, col)

    def _one_char(self, token_type: TokenType, line: int, col: int) -> Token:
        lexeme = self.current_char
        self.advance()
        return Token(token_type, lexeme, line, col)

    def get_next_token(self) -> Token:
        """Lexical analyzer that returns tokens one at a time."""
        while self.current_char is not None:
            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            if self.current_char == ";":
                self.skip_comment()
                continue

            line, col = self.line, self.column
            nxt = self.peek_char()

            if self.current_char == ">" and nxt == "=":
                return self._two_char(TokenType.GTE, ">=", line, col)
            if self.current_char == "<" and nxt == "=":
                return self._two_char(TokenType.LTE, "<=", line, col)
            if self.current_char == "&" and nxt == "&":
                return self._two_char(TokenType.AND, "&&", line, col)
            if self.current_char == "|" and nxt == "|":
                return self._two_char(TokenType.OR, "||", line, col)

            # Negative literal: `-` glued to a digit.
            if self.current_char == "-" and self.is_digit(nxt):
                return Token(TokenType.INTEGER, self.integer(), line, col)

            match self.current_char:
                case "+":
                    return self._one_char(TokenType.PLUS, line, col)
                case "-":
                    return self._one_char(TokenType.MINUS, line, col)
                case "*":
                    return self._one_char(TokenType.STAR, line, col)
                case "/":
                    return self._one_char(TokenType.SLASH, line, col)
                case "&":
                    return self._one_char(TokenType.AMP, line, col)
                case "|":
                    return self._one_char(TokenType.PIPE, line, col)
                case "(":
                    return self._one_char(TokenType.LPAREN, line, col)
                case ")":
                    return self._one_char(TokenType.RPAREN, line, col)
                case "#":
                    return self._one_char(TokenType.HASH, line, col)
                case ":":
                    return self._one_char(TokenType.COLON, line, col)
                case "=":
                    return self._one_char(TokenType.EQ, line, col)
                case "<":
                    return self._one_char(TokenType.LT, line, col)
                case ">":
                    return self._one_char(TokenType.GT, line, col)

            if self.is_digit(self.current_char):
                return Token(TokenType.INTEGER, self.integer(), line, col)

            if self.current_char.isalpha() or self.current_char == "_":
                ident = self.identifier()
                token_type = self.keywords.get(ident, TokenType.IDENTIFIER)
                return Token(token_type, ident, line, col)

            raise self.error(f"Unexpected character '{self.current_char}'")

        return Token(TokenType.EOF, None, self.line, self.column)

    def tokenize(self) -> List[Token]:
        """Return all tokens from the input string."""
        tokens = []
        while True:
            token = self.get_next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        return tokens
