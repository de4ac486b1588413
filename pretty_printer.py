"""Pretty-printer for opslang program trees.

Provides two renderings:

- `PrettyPrinter.print_ast(node, indent, prefix)` renders a tree into a
  readable multi-line outline, intended for debugging and the CLI's
  `--print-ast` output.
- `PrettyPrinter.print_surface(node)` / `print_program(program)` render
  source text in the parenthesised surface syntax. Parsing that text yields
  a tree equal to the original.

Examples:
    PrettyPrinter.print_ast(program.root)
    PrettyPrinter.print_program(program)
"""

from __future__ import annotations
from typing import List
from ast_nodes import *


def _flatten_seq(node: ASTNode) -> List[ASTNode]:
    stmts = []
    while isinstance(node, SeqNode):
        stmts.append(node.first)
        node = node.rest
    stmts.append(node)
    return stmts


class PrettyPrinter:
    @staticmethod
    def print_ast(node: ASTNode, indent: int = 0, prefix: str = "") -> str:
        """Pretty print a tree and return it as a string."""
        lines = []
        indent_str = " " * indent

        if not isinstance(node, ASTNode):
            lines.append(f"{indent_str}{prefix}{node}")
            return "\n".join(lines)

        match node:
            case ConstNode(value=v):
                lines.append(f"{indent_str}{prefix}Const({v})")

            case GetVarNode(var_id=var_id):
                lines.append(f"{indent_str}{prefix}GetVar(#{var_id})")

            case SetVarNode(var_id=var_id, value=expr):
                lines.append(f"{indent_str}{prefix}SetVar(#{var_id})")
                lines.append(PrettyPrinter.print_ast(expr, indent + 2, "value: "))

            case SeqNode():
                lines.append(f"{indent_str}{prefix}Seq")
                for i, stmt in enumerate(_flatten_seq(node)):
                    lines.append(PrettyPrinter.print_ast(stmt, indent + 4, f"stmt[{i}]: "))

            case BinaryOpNode(left=left, operator=op, right=right) | CompareNode(
                left=left, operator=op, right=right
            ) | LogicalNode(left=left, operator=op, right=right):
                kind = type(node).__name__.removesuffix("Node")
                lines.append(f"{indent_str}{prefix}{kind}({op})")
                lines.append(PrettyPrinter.print_ast(left, indent + 2, "left: "))
                lines.append(PrettyPrinter.print_ast(right, indent + 2, "right: "))

            case IfElseNode(condition=cond, then_branch=then_b, else_branch=else_b):
                lines.append(f"{indent_str}{prefix}IfElse")
                lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                lines.append(PrettyPrinter.print_ast(then_b, indent + 4, "then: "))
                lines.append(PrettyPrinter.print_ast(else_b, indent + 4, "else: "))

            case RangeNode(var_id=var_id, start=start, stop=stop, body=body):
                lines.append(f"{indent_str}{prefix}Range(#{var_id})")
                lines.append(PrettyPrinter.print_ast(start, indent + 4, "from: "))
                lines.append(PrettyPrinter.print_ast(stop, indent + 4, "to: "))
                lines.append(PrettyPrinter.print_ast(body, indent + 4, "body: "))

            case CallNode(func_name=name, arguments=args):
                lines.append(f"{indent_str}{prefix}Call({name})")
                for i, arg in enumerate(args):
                    lines.append(PrettyPrinter.print_ast(arg, indent + 4, f"arg[{i}]: "))

            case _:
                lines.append(f"{indent_str}{prefix}Unknown node type: {type(node)}")

        return "\n".join(line for line in lines if line)

    @staticmethod
    def print_function(fdef: FunctionDef, indent: int = 0) -> str:
        indent_str = " " * indent
        params = ", ".join(f"{p.name}: #{p.var_id}" for p in fdef.params)
        lines = [f"{indent_str}FunctionDef({fdef.name}, params=[{params}])"]
        lines.append(PrettyPrinter.print_ast(fdef.body, indent + 4, "body: "))
        return "\n".join(lines)

    @staticmethod
    def print_surface(node: ASTNode) -> str:
        """Return `node` as a single surface-syntax statement, e.g. `(+ (#1) (2))`.

        Sequences have no operand form; a `SeqNode` is only printable where a
        statement list is expected (see `print_block`).
        """
        return f"({PrettyPrinter._op(node)})"

    @staticmethod
    def print_block(node: ASTNode) -> str:
        """Render a statement list: a SeqNode chain or a single statement."""
        return "(" + " ".join(PrettyPrinter.print_surface(s) for s in _flatten_seq(node)) + ")"

    @staticmethod
    def _op(node: ASTNode) -> str:
        _s = PrettyPrinter.print_surface
        _b = PrettyPrinter.print_block

        match node:
            case ConstNode(value=v):
                return str(v)
            case GetVarNode(var_id=var_id):
                return f"#{var_id}"
            case SetVarNode(var_id=var_id, value=expr):
                return f"set {var_id} {_s(expr)}"
            case BinaryOpNode(left=l, operator=op, right=r) | CompareNode(
                left=l, operator=op, right=r
            ) | LogicalNode(left=l, operator=op, right=r):
                return f"{op.symbol} {_s(l)} {_s(r)}"
            case IfElseNode(condition=cond, then_branch=then_b, else_branch=else_b):
                return f"if {_s(cond)} {_b(then_b)} {_b(else_b)}"
            case RangeNode(var_id=var_id, start=start, stop=stop, body=body):
                return f"range {var_id} {_s(start)} {_s(stop)} {_b(body)}"
            case CallNode(func_name=name, arguments=args):
                return " ".join([name] + [_s(a) for a in args])
            case SeqNode():
                raise ValueError("A sequence cannot be printed as a single operand")
            case _:
                raise ValueError(f"Cannot print node: {node!r}")

    @staticmethod
    def print_program(program: Program) -> str:
        """Render a whole program: function definitions first, then the root statements."""
        lines = []
        for fdef in program.functions.values():
            params = " ".join(f"{p.name}:{p.var_id}" for p in fdef.params)
            lines.append(f"(fn {fdef.name} ({params})")
            lines.append(f"  {PrettyPrinter.print_block(fdef.body)})")
        for stmt in _flatten_seq(program.root):
            lines.append(PrettyPrinter.print_surface(stmt))
        return "\n".join(lines)
