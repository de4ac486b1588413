"""Build-time checks for opslang programs.

`Resolver.check_program` walks the root node and every function body before
evaluation starts and rejects trees the evaluator must never see:

- calls to functions missing from the program's function table,
- calls whose argument count differs from the callee's parameter count,
- negative variable ids (in `#`, `set`, `range` and parameter slots),
- function definitions binding the same variable id twice,
- constants that do not fit in the configured word width.

Errors are raised as `UnresolvedReferenceError` or `ProgramError`, both
`SyntaxError` subclasses.
"""

from __future__ import annotations
from typing import Mapping

from ast_nodes import *
from errors import ProgramError, UnresolvedReferenceError


def _where(node) -> str:
    if getattr(node, "line", 0):
        return f" at line {node.line}, column {node.column}"
    return ""


class Resolver:
    @staticmethod
    def check_var_id(var_id: int, node) -> None:
        if not isinstance(var_id, int) or var_id < 0:
            raise ProgramError(f"Invalid variable id {var_id!r}{_where(node)}")

    @staticmethod
    def check_node(
        node: ASTNode, functions: Mapping[str, FunctionDef], word_bits: int = 64
    ) -> None:
        """Recursively validate `node` against the function table."""
        match node:
            case ConstNode(value=v):
                lo = -(1 << (word_bits - 1))
                hi = (1 << (word_bits - 1)) - 1
                if not isinstance(v, int) or not lo <= v <= hi:
                    raise ProgramError(
                        f"Constant {v!r} does not fit in {word_bits} bits{_where(node)}"
                    )

            case GetVarNode(var_id=var_id):
                Resolver.check_var_id(var_id, node)

            case SetVarNode(var_id=var_id, value=expr):
                Resolver.check_var_id(var_id, node)
                Resolver.check_node(expr, functions, word_bits)

            case SeqNode():
                # Walk the statement chain iteratively; long programs are long chains.
                while isinstance(node, SeqNode):
                    Resolver.check_node(node.first, functions, word_bits)
                    node = node.rest
                Resolver.check_node(node, functions, word_bits)

            case BinaryOpNode(left=l, operator=op, right=r):
                if op not in ARITHMETIC_OPERATORS:
                    raise ProgramError(f"'{op}' is not an arithmetic operator{_where(node)}")
                Resolver.check_node(l, functions, word_bits)
                Resolver.check_node(r, functions, word_bits)

            case CompareNode(left=l, operator=op, right=r):
                if op not in COMPARISON_OPERATORS:
                    raise ProgramError(f"'{op}' is not a comparison operator{_where(node)}")
                Resolver.check_node(l, functions, word_bits)
                Resolver.check_node(r, functions, word_bits)

            case LogicalNode(left=l, operator=op, right=r):
                if op not in LOGICAL_OPERATORS:
                    raise ProgramError(f"'{op}' is not a logical operator{_where(node)}")
                Resolver.check_node(l, functions, word_bits)
                Resolver.check_node(r, functions, word_bits)

            case IfElseNode(condition=cond, then_branch=then_b, else_branch=else_b):
                Resolver.check_node(cond, functions, word_bits)
                Resolver.check_node(then_b, functions, word_bits)
                Resolver.check_node(else_b, functions, word_bits)

            case RangeNode(var_id=var_id, start=start, stop=stop, body=body):
                Resolver.check_var_id(var_id, node)
                Resolver.check_node(start, functions, word_bits)
                Resolver.check_node(stop, functions, word_bits)
                Resolver.check_node(body, functions, word_bits)

            case CallNode(func_name=fname, arguments=args):
                fdef = functions.get(fname)
                if fdef is None:
                    raise UnresolvedReferenceError(
                        fname, f"Call to undefined function '{fname}'{_where(node)}"
                    )
                if fdef.arity != len(args):
                    raise ProgramError(
                        f"Function '{fname}' expects {fdef.arity} args, got {len(args)}{_where(node)}"
                    )
                for arg in args:
                    Resolver.check_node(arg, functions, word_bits)

            case _:
                raise ProgramError(f"Unknown node in program tree: {node!r}")

    @staticmethod
    def check_function(
        fdef: FunctionDef, functions: Mapping[str, FunctionDef], word_bits: int = 64
    ) -> None:
        seen = set()
        for param in fdef.params:
            Resolver.check_var_id(param.var_id, fdef)
            if param.var_id in seen:
                raise ProgramError(
                    f"Function '{fdef.name}' binds variable #{param.var_id} more than once"
                )
            seen.add(param.var_id)
        Resolver.check_node(fdef.body, functions, word_bits)

    @staticmethod
    def check_program(program: Program, word_bits: int = 64) -> None:
        for name, fdef in program.functions.items():
            if name != fdef.name:
                raise ProgramError(
                    f"Function table key '{name}' does not match definition '{fdef.name}'"
                )
            Resolver.check_function(fdef, program.functions, word_bits)
        Resolver.check_node(program.root, program.functions, word_bits)
