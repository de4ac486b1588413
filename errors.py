"""Error types raised while building or evaluating opslang programs.

Build-time problems (a malformed tree, a call to an unknown function) are
`SyntaxError` subclasses, matching how the lexer and parser report errors.
Failures during evaluation derive from `EvaluationError` and additionally
from the matching builtin exception, so callers may catch either.
"""

from __future__ import annotations
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ast_nodes import ASTNode


class ProgramError(SyntaxError):
    """A program tree that violates the node grammar."""


class UnresolvedReferenceError(ProgramError):
    """A call names a function that is not defined."""

    def __init__(self, func_name: str, message: Optional[str] = None):
        super().__init__(message or f"Call to undefined function '{func_name}'")
        self.func_name = func_name


class EvaluationError(RuntimeError):
    """Base class for failures that abort a program run."""

    def __init__(self, message: str, node: Optional["ASTNode"] = None):
        super().__init__(message)
        self.node = node

    def __str__(self) -> str:
        msg = super().__str__()
        if self.node is not None and self.node.line:
            return f"{msg} (line {self.node.line}, column {self.node.column})"
        return msg


class DivisionByZeroError(EvaluationError, ZeroDivisionError):
    pass


class ArithmeticOverflowError(EvaluationError, OverflowError):
    pass


class StackExhaustionError(EvaluationError, RecursionError):
    pass
