"""Graphviz visualization helpers for program trees.

Provides `render_program_dot(program)` which returns a `graphviz.Digraph`
object (not rendered). `write_and_render` can write the file to disk.

Layout: the root statements and each function body are drawn in their own
cluster (`cluster_main`, `cluster_fn_<name>`). Every node becomes a box
labelled with its kind and immediate fields; edges are labelled with the
child role (`left`, `then`, `arg[0]`, ...). Call nodes get a dashed edge to
the cluster of the function they invoke when `link_calls` is set.
"""

from typing import Dict, List, Optional, Tuple
import html
import re
from ast_nodes import *
from graphviz import Digraph


def _label(node: ASTNode) -> str:
    match node:
        case ConstNode(value=v):
            text = f"Const {v}"
        case GetVarNode(var_id=var_id):
            text = f"GetVar #{var_id}"
        case SetVarNode(var_id=var_id):
            text = f"SetVar #{var_id}"
        case SeqNode():
            text = "Seq"
        case BinaryOpNode(operator=op) | CompareNode(operator=op) | LogicalNode(operator=op):
            text = f"{type(node).__name__.removesuffix('Node')} {op.symbol}"
        case IfElseNode():
            text = "IfElse"
        case RangeNode(var_id=var_id):
            text = f"Range #{var_id}"
        case CallNode(func_name=name):
            text = f"Call {name}"
        case _:
            text = type(node).__name__
    return html.escape(text)


def _children(node: ASTNode) -> List[Tuple[str, ASTNode]]:
    match node:
        case SetVarNode(value=expr):
            return [("value", expr)]
        case SeqNode(first=first, rest=rest):
            return [("first", first), ("rest", rest)]
        case BinaryOpNode(left=l, right=r) | CompareNode(left=l, right=r) | LogicalNode(
            left=l, right=r
        ):
            return [("left", l), ("right", r)]
        case IfElseNode(condition=cond, then_branch=then_b, else_branch=else_b):
            return [("cond", cond), ("then", then_b), ("else", else_b)]
        case RangeNode(start=start, stop=stop, body=body):
            return [("from", start), ("to", stop), ("body", body)]
        case CallNode(arguments=args):
            return [(f"arg[{i}]", a) for i, a in enumerate(args)]
        case _:
            return []


def _cluster_name(func: Optional[str]) -> str:
    if func is None:
        return "cluster_main"
    return f"cluster_fn_{re.sub(r'[^0-9A-Za-z_]', '_', func)}"


class _TreeEmitter:
    def __init__(self) -> None:
        self.counter = 0
        self.calls: List[Tuple[str, str]] = []
        self.entries: Dict[Optional[str], str] = {}

    def emit(self, graph, node: ASTNode) -> str:
        # Iterative walk so long statement chains do not hit the recursion limit.
        root_id = self._new_id()
        stack = [(node, root_id)]
        while stack:
            current, node_id = stack.pop()
            shape = "ellipse" if isinstance(current, (ConstNode, GetVarNode)) else "box"
            graph.node(node_id, label=_label(current), shape=shape)
            if isinstance(current, CallNode):
                self.calls.append((node_id, current.func_name))
            for role, child in _children(current):
                child_id = self._new_id()
                graph.edge(node_id, child_id, label=role)
                stack.append((child, child_id))
        return root_id

    def _new_id(self) -> str:
        self.counter += 1
        return f"n{self.counter}"


def render_program_dot(program: Program, link_calls: bool = True) -> Digraph:
    """Return a graphviz.Digraph for the given program.

    The caller may call `dot.source` to inspect the dot text, or call
    `dot.render(filename, format=...)` to write files (requires Graphviz installed).
    """
    dot = Digraph(format="svg")
    dot.attr("graph", rankdir="TB", compound="true")
    emitter = _TreeEmitter()

    with dot.subgraph(name=_cluster_name(None)) as c:
        c.attr(label="main", style="rounded")
        emitter.entries[None] = emitter.emit(c, program.root)

    for name, fdef in program.functions.items():
        with dot.subgraph(name=_cluster_name(name)) as c:
            params = ", ".join(f"{p.name}:#{p.var_id}" for p in fdef.params)
            c.attr(label=f"fn {name}({params})", style="rounded")
            emitter.entries[name] = emitter.emit(c, fdef.body)

    if link_calls:
        for src, func in emitter.calls:
            target = emitter.entries.get(func)
            if target is not None:
                dot.edge(
                    src,
                    target,
                    style="dashed",
                    lhead=_cluster_name(func),
                    constraint="false",
                )

    return dot


def write_and_render(
    program: Program,
    out_path: str,
    fmt: str = "svg",
    link_calls: bool = True,
) -> None:
    """Write and render the program tree to the given path (without extension).

    Example: write_and_render(program, 'out/tree', fmt='png') will create
    out/tree.png (requires Graphviz)."""
    dot = render_program_dot(program, link_calls=link_calls)
    dot.format = fmt
    # render appends the extension itself
    dot.render(out_path, cleanup=True)
