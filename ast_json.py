"""Convert program trees into JSON-serializable structures.

This module provides `ast_to_json(node)` which returns a nested structure
of dicts/lists/primitives describing a node, and `program_to_json(program)`
which adds the function table. It encodes the node kind and key fields only;
source positions are included when known.
"""

from typing import Any, Dict, Optional
from ast_nodes import *


def _with_pos(node: ASTNode, data: Dict[str, Any]) -> Dict[str, Any]:
    if node.line:
        data["line"] = node.line
        data["column"] = node.column
    return data


def ast_to_json(node: Optional[ASTNode]) -> Any:
    if node is None:
        return None

    match node:
        case ConstNode(value=v):
            data = {"node_type": "Const", "value": v}
        case GetVarNode(var_id=var_id):
            data = {"node_type": "GetVar", "var": var_id}
        case SetVarNode(var_id=var_id, value=expr):
            data = {"node_type": "SetVar", "var": var_id, "value": ast_to_json(expr)}
        case SeqNode(first=first, rest=rest):
            data = {
                "node_type": "Seq",
                "first": ast_to_json(first),
                "rest": ast_to_json(rest),
            }
        case BinaryOpNode(left=l, operator=op, right=r) | CompareNode(
            left=l, operator=op, right=r
        ) | LogicalNode(left=l, operator=op, right=r):
            data = {
                "node_type": type(node).__name__.removesuffix("Node"),
                "operator": op.symbol,
                "left": ast_to_json(l),
                "right": ast_to_json(r),
            }
        case IfElseNode(condition=cond, then_branch=then_b, else_branch=else_b):
            data = {
                "node_type": "IfElse",
                "condition": ast_to_json(cond),
                "then": ast_to_json(then_b),
                "else": ast_to_json(else_b),
            }
        case RangeNode(var_id=var_id, start=start, stop=stop, body=body):
            data = {
                "node_type": "Range",
                "var": var_id,
                "from": ast_to_json(start),
                "to": ast_to_json(stop),
                "body": ast_to_json(body),
            }
        case CallNode(func_name=name, arguments=args):
            data = {
                "node_type": "Call",
                "function": name,
                "arguments": [ast_to_json(a) for a in args],
            }
        case _:
            # Fallback: represent unknown nodes by their type name
            return {"node_type": type(node).__name__}

    return _with_pos(node, data)


def function_to_json(fdef: FunctionDef) -> Dict[str, Any]:
    return {
        "name": fdef.name,
        "params": [{"name": p.name, "var": p.var_id} for p in fdef.params],
        "body": ast_to_json(fdef.body),
    }


def program_to_json(program: Program) -> Dict[str, Any]:
    return {
        "functions": [function_to_json(f) for f in program.functions.values()],
        "root": ast_to_json(program.root),
    }
