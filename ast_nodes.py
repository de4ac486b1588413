"""Program tree definitions for the opslang expression language.

Every node is a frozen dataclass tagged with a `NodeType`; the evaluator,
resolver, printers and visualizer all pattern-match on the concrete class.
Nodes are immutable once built and compare structurally: the optional
`line`/`column` source positions are excluded from equality so a tree built
by the parser equals the same tree built through `builder`.

Operators sharing an evaluation shape are grouped: `BinaryOpNode` carries an
arithmetic/bitwise `Operator`, `CompareNode` a comparison and `LogicalNode`
one of `&&`/`||`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Tuple


class NodeType(Enum):
    CONST = auto()
    GET_VAR = auto()
    SET_VAR = auto()
    SEQ = auto()
    BINARY_OP = auto()
    COMPARE = auto()
    LOGICAL = auto()
    IF_ELSE = auto()
    RANGE = auto()
    CALL = auto()

    def __str__(self) -> str:
        return self.name


class Operator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    BIT_AND = "&"
    BIT_OR = "|"
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    EQU = "="
    AND = "&&"
    OR = "||"

    def __str__(self) -> str:
        return self.value

    @property
    def symbol(self) -> str:
        return self.value


ARITHMETIC_OPERATORS = frozenset(
    {
        Operator.ADD,
        Operator.SUB,
        Operator.MUL,
        Operator.DIV,
        Operator.BIT_AND,
        Operator.BIT_OR,
    }
)
COMPARISON_OPERATORS = frozenset(
    {Operator.GT, Operator.LT, Operator.GTE, Operator.LTE, Operator.EQU}
)
LOGICAL_OPERATORS = frozenset({Operator.AND, Operator.OR})


# Base node
@dataclass(frozen=True)
class ASTNode:
    type: NodeType
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)


@dataclass(frozen=True)
class ConstNode(ASTNode):
    type: NodeType = NodeType.CONST
    value: int = 0


@dataclass(frozen=True)
class GetVarNode(ASTNode):
    type: NodeType = NodeType.GET_VAR
    var_id: int = 0


@dataclass(frozen=True)
class SetVarNode(ASTNode):
    type: NodeType = NodeType.SET_VAR
    var_id: int = 0
    value: ASTNode = field(default_factory=lambda: ConstNode())


@dataclass(frozen=True)
class SeqNode(ASTNode):
    type: NodeType = NodeType.SEQ
    first: ASTNode = field(default_factory=lambda: ConstNode())
    rest: ASTNode = field(default_factory=lambda: ConstNode())


@dataclass(frozen=True)
class BinaryOpNode(ASTNode):
    type: NodeType = NodeType.BINARY_OP
    left: ASTNode = field(default_factory=lambda: ConstNode())
    operator: Operator = Operator.ADD
    right: ASTNode = field(default_factory=lambda: ConstNode())


@dataclass(frozen=True)
class CompareNode(ASTNode):
    type: NodeType = NodeType.COMPARE
    left: ASTNode = field(default_factory=lambda: ConstNode())
    operator: Operator = Operator.EQU
    right: ASTNode = field(default_factory=lambda: ConstNode())


@dataclass(frozen=True)
class LogicalNode(ASTNode):
    type: NodeType = NodeType.LOGICAL
    left: ASTNode = field(default_factory=lambda: ConstNode())
    operator: Operator = Operator.AND
    right: ASTNode = field(default_factory=lambda: ConstNode())


@dataclass(frozen=True)
class IfElseNode(ASTNode):
    type: NodeType = NodeType.IF_ELSE
    condition: ASTNode = field(default_factory=lambda: ConstNode())
    then_branch: ASTNode = field(default_factory=lambda: ConstNode())
    else_branch: ASTNode = field(default_factory=lambda: ConstNode())


@dataclass(frozen=True)
class RangeNode(ASTNode):
    type: NodeType = NodeType.RANGE
    var_id: int = 0
    start: ASTNode = field(default_factory=lambda: ConstNode())
    stop: ASTNode = field(default_factory=lambda: ConstNode())
    body: ASTNode = field(default_factory=lambda: ConstNode())


@dataclass(frozen=True)
class CallNode(ASTNode):
    type: NodeType = NodeType.CALL
    func_name: str = ""
    arguments: Tuple[ASTNode, ...] = ()


# Function definitions and whole programs
@dataclass(frozen=True)
class Parameter:
    name: str
    var_id: int


@dataclass(frozen=True)
class FunctionDef:
    name: str
    params: Tuple[Parameter, ...] = ()
    body: ASTNode = field(default_factory=lambda: ConstNode())
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    @property
    def arity(self) -> int:
        return len(self.params)


@dataclass(frozen=True)
class Program:
    root: ASTNode
    functions: Dict[str, FunctionDef] = field(default_factory=dict)
