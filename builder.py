"""Python API for constructing opslang programs without going through text.

Small constructor functions mirror the surface syntax, and `ProgramBuilder`
collects function definitions:

    b = ProgramBuilder()
    b.function("Add", [("A", 1), ("B", 2)], add(var(1), var(2)))
    program = b.build(set_var(1, call("Add", const(6), const(5))), var(1))

`seq` turns a list of statements into the right-associated `SeqNode` chain
the evaluator expects; the parser uses it for every statement list too.
"""

from __future__ import annotations
from typing import Dict, Iterable, Sequence, Tuple, Union

from ast_nodes import *
from errors import ProgramError
from resolver import Resolver


def seq(*stmts: ASTNode) -> ASTNode:
    """Chain statements into nested SeqNodes ending in the last statement."""
    if not stmts:
        raise ProgramError("A statement list needs at least one statement")
    result = stmts[-1]
    for stmt in reversed(stmts[:-1]):
        result = SeqNode(first=stmt, rest=result)
    return result


def const(value: int) -> ConstNode:
    return ConstNode(value=value)


def var(var_id: int) -> GetVarNode:
    return GetVarNode(var_id=var_id)


def set_var(var_id: int, value: ASTNode) -> SetVarNode:
    return SetVarNode(var_id=var_id, value=value)


def binary(
    op: Operator, left: ASTNode, right: ASTNode, line: int = 0, column: int = 0
) -> ASTNode:
    """Build the node class matching `op`."""
    pos = {"line": line, "column": column}
    if op in ARITHMETIC_OPERATORS:
        return BinaryOpNode(left=left, operator=op, right=right, **pos)
    if op in COMPARISON_OPERATORS:
        return CompareNode(left=left, operator=op, right=right, **pos)
    if op in LOGICAL_OPERATORS:
        return LogicalNode(left=left, operator=op, right=right, **pos)
    raise ProgramError(f"Unknown operator: {op}")


def add(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.ADD, left, right)


def sub(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.SUB, left, right)


def mul(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.MUL, left, right)


def div(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.DIV, left, right)


def bit_and(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.BIT_AND, left, right)


def bit_or(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.BIT_OR, left, right)


def gt(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.GT, left, right)


def lt(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.LT, left, right)


def gte(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.GTE, left, right)


def lte(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.LTE, left, right)


def equ(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.EQU, left, right)


def and_(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.AND, left, right)


def or_(left: ASTNode, right: ASTNode) -> ASTNode:
    return binary(Operator.OR, left, right)


def if_else(
    condition: ASTNode,
    then_branch: Union[ASTNode, Sequence[ASTNode]],
    else_branch: Union[ASTNode, Sequence[ASTNode]],
) -> IfElseNode:
    """Branches may be a single node or a list of statements."""
    return IfElseNode(
        condition=condition,
        then_branch=_block(then_branch),
        else_branch=_block(else_branch),
    )


def range_(
    var_id: int,
    start: ASTNode,
    stop: ASTNode,
    body: Union[ASTNode, Sequence[ASTNode]],
) -> RangeNode:
    return RangeNode(var_id=var_id, start=start, stop=stop, body=_block(body))


def call(func_name: str, *arguments: ASTNode) -> CallNode:
    return CallNode(func_name=func_name, arguments=tuple(arguments))


def _block(body: Union[ASTNode, Sequence[ASTNode]]) -> ASTNode:
    if isinstance(body, ASTNode):
        return body
    return seq(*body)


ParamSpec = Union[Parameter, Tuple[str, int], int]


def _param(spec: ParamSpec, index: int) -> Parameter:
    if isinstance(spec, Parameter):
        return spec
    if isinstance(spec, int):
        return Parameter(name=f"P{index}", var_id=spec)
    name, var_id = spec
    return Parameter(name=name, var_id=var_id)


class ProgramBuilder:
    """Collects function definitions and produces a resolved `Program`."""

    def __init__(self) -> None:
        self.functions: Dict[str, FunctionDef] = {}

    def define(self, fdef: FunctionDef) -> FunctionDef:
        if fdef.name in self.functions:
            raise ProgramError(f"Function '{fdef.name}' already defined")
        self.functions[fdef.name] = fdef
        return fdef

    def function(
        self, name: str, params: Iterable[ParamSpec], *body: ASTNode
    ) -> FunctionDef:
        """Define `name` with the given parameter slots and body statements.

        Parameters may be `Parameter` objects, `(name, var_id)` pairs or bare
        variable ids.
        """
        fdef = FunctionDef(
            name=name,
            params=tuple(_param(p, i) for i, p in enumerate(params)),
            body=seq(*body),
        )
        return self.define(fdef)

    def build(self, *stmts: ASTNode, word_bits: int = 64) -> Program:
        """Return the program running `stmts` in order, checked for resolution."""
        program = Program(root=seq(*stmts), functions=dict(self.functions))
        Resolver.check_program(program, word_bits=word_bits)
        return program
