"""Recursive evaluator for opslang program trees.

`evaluate(node, env, functions)` walks a tree post-order and returns the
integer value of `node`. `run(program)` is the entry point used by the CLI
and tests: it resolves the program, creates the root environment and
evaluates the root node.

Semantics worth keeping in mind:
- `&&` and `||` always evaluate both operands; only `if` short-circuits.
- `range` evaluates its bounds once, assigns the loop variable in the
  current environment before each iteration and always yields 0.
- A call evaluates its arguments in the caller's environment and runs the
  body in a fresh one holding only the bound parameters.

Integers are fixed width (`EvalOptions.word_bits`). With the default
`checked` policy a result outside the word range raises
`ArithmeticOverflowError`; with `wrap` it wraps in two's complement.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ast_nodes import *
from environment import Environment
from errors import (
    ArithmeticOverflowError,
    DivisionByZeroError,
    EvaluationError,
    ProgramError,
    StackExhaustionError,
    UnresolvedReferenceError,
)
from resolver import Resolver

logger = logging.getLogger(__name__)

OVERFLOW_POLICIES = ("checked", "wrap")


@dataclass(frozen=True)
class EvalOptions:
    word_bits: int = 64
    overflow: str = "checked"
    max_call_depth: Optional[int] = None

    def __post_init__(self) -> None:
        if self.overflow not in OVERFLOW_POLICIES:
            raise ValueError(
                f"Unknown overflow policy '{self.overflow}', expected one of {OVERFLOW_POLICIES}"
            )
        if self.word_bits < 2:
            raise ValueError("word_bits must be at least 2")
        if self.max_call_depth is not None and self.max_call_depth < 0:
            raise ValueError("max_call_depth must be non-negative")

    @property
    def min_value(self) -> int:
        return -(1 << (self.word_bits - 1))

    @property
    def max_value(self) -> int:
        return (1 << (self.word_bits - 1)) - 1


DEFAULT_OPTIONS = EvalOptions()


class _Frame:
    """Per-run evaluation state shared by every nested call."""

    def __init__(self, functions: Mapping[str, FunctionDef], options: EvalOptions):
        self.functions = functions
        self.options = options
        self.depth = 0

    def fit(self, value: int, node: ASTNode) -> int:
        opts = self.options
        if opts.min_value <= value <= opts.max_value:
            return value
        if opts.overflow == "wrap":
            mask = (1 << opts.word_bits) - 1
            value &= mask
            if value > opts.max_value:
                value -= 1 << opts.word_bits
            return value
        raise ArithmeticOverflowError(
            f"Integer overflow: result {value} does not fit in {opts.word_bits} bits",
            node,
        )


def _truncating_div(lv: int, rv: int) -> int:
    # Python's // floors; the language truncates toward zero.
    q = abs(lv) // abs(rv)
    return q if (lv < 0) == (rv < 0) else -q


def _apply_arithmetic(op: Operator, lv: int, rv: int, node: ASTNode) -> int:
    match op:
        case Operator.ADD:
            return lv + rv
        case Operator.SUB:
            return lv - rv
        case Operator.MUL:
            return lv * rv
        case Operator.DIV:
            if rv == 0:
                raise DivisionByZeroError("Division by zero", node)
            return _truncating_div(lv, rv)
        case Operator.BIT_AND:
            return lv & rv
        case Operator.BIT_OR:
            return lv | rv
        case _:
            raise EvaluationError(f"Unsupported arithmetic operator: {op}", node)


def _compare(op: Operator, lv: int, rv: int, node: ASTNode) -> bool:
    match op:
        case Operator.GT:
            return lv > rv
        case Operator.LT:
            return lv < rv
        case Operator.GTE:
            return lv >= rv
        case Operator.LTE:
            return lv <= rv
        case Operator.EQU:
            return lv == rv
        case _:
            raise EvaluationError(f"Unsupported comparison operator: {op}", node)


def _eval(node: ASTNode, env: Environment, frame: _Frame) -> int:
    match node:
        case ConstNode(value=v):
            return v

        case GetVarNode(var_id=var_id):
            return env.get(var_id)

        case SetVarNode(var_id=var_id, value=expr):
            return env.set(var_id, _eval(expr, env, frame))

        case SeqNode():
            while isinstance(node, SeqNode):
                _eval(node.first, env, frame)
                node = node.rest
            return _eval(node, env, frame)

        case BinaryOpNode(left=l, operator=op, right=r):
            lv = _eval(l, env, frame)
            rv = _eval(r, env, frame)
            return frame.fit(_apply_arithmetic(op, lv, rv, node), node)

        case CompareNode(left=l, operator=op, right=r):
            lv = _eval(l, env, frame)
            rv = _eval(r, env, frame)
            return 1 if _compare(op, lv, rv, node) else 0

        case LogicalNode(left=l, operator=op, right=r):
            # Both sides run before combining: no short-circuit.
            lhs = _eval(l, env, frame) > 0
            rhs = _eval(r, env, frame) > 0
            match op:
                case Operator.AND:
                    return 1 if lhs and rhs else 0
                case Operator.OR:
                    return 1 if lhs or rhs else 0
                case _:
                    raise EvaluationError(f"Unsupported logical operator: {op}", node)

        case IfElseNode(condition=cond, then_branch=then_b, else_branch=else_b):
            if _eval(cond, env, frame) > 0:
                return _eval(then_b, env, frame)
            return _eval(else_b, env, frame)

        case RangeNode(var_id=var_id, start=start, stop=stop, body=body):
            lo = _eval(start, env, frame)
            hi = _eval(stop, env, frame)
            logger.debug("range #%d over [%d, %d)", var_id, lo, hi)
            for i in range(lo, hi):
                env.set(var_id, i)
                _eval(body, env, frame)
            return 0

        case CallNode(func_name=fname, arguments=args):
            fdef = frame.functions.get(fname)
            if fdef is None:
                raise UnresolvedReferenceError(fname)
            if len(args) != fdef.arity:
                raise ProgramError(
                    f"Function '{fname}' expects {fdef.arity} args, got {len(args)}"
                )
            evaled = [_eval(a, env, frame) for a in args]
            limit = frame.options.max_call_depth
            if limit is not None and frame.depth >= limit:
                raise StackExhaustionError(
                    f"Maximum call depth {limit} exceeded calling '{fname}'", node
                )
            local_env = Environment.fresh()
            for param, val in zip(fdef.params, evaled):
                local_env.set(param.var_id, val)
            logger.debug("call %s%s depth=%d", fname, tuple(evaled), frame.depth + 1)
            frame.depth += 1
            try:
                result = _eval(fdef.body, local_env, frame)
            finally:
                frame.depth -= 1
            logger.debug("return %s -> %d", fname, result)
            return result

        case _:
            raise EvaluationError(f"Unhandled node type: {node!r}", node)


def evaluate(
    node: ASTNode,
    env: Optional[Environment] = None,
    functions: Optional[Mapping[str, FunctionDef]] = None,
    options: EvalOptions = DEFAULT_OPTIONS,
) -> int:
    """Evaluate a single node against `env` (a new environment if omitted).

    Unlike `run`, the tree is not resolved first; calls to unknown functions
    surface as `UnresolvedReferenceError` when reached.
    """
    if env is None:
        env = Environment()
    frame = _Frame(functions or {}, options)
    try:
        return _eval(node, env, frame)
    except RecursionError as e:
        if isinstance(e, StackExhaustionError):
            raise
        raise StackExhaustionError(
            "Host stack exhausted (unbounded recursion?)", node
        ) from None


def run(
    program: Program,
    *,
    word_bits: int = 64,
    overflow: str = "checked",
    max_call_depth: Optional[int] = None,
    env: Optional[Environment] = None,
) -> int:
    """Resolve `program`, evaluate its root node and return the result.

    A root environment is created for the run unless `env` is given, which
    lets callers inspect the top-level variables afterwards.
    """
    options = EvalOptions(
        word_bits=word_bits, overflow=overflow, max_call_depth=max_call_depth
    )
    Resolver.check_program(program, word_bits=options.word_bits)
    if env is None:
        env = Environment()
    return evaluate(program.root, env, program.functions, options)
