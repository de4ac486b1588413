"""Operator semantics of the evaluator."""

import pytest

from builder import *
from environment import Environment
from errors import ArithmeticOverflowError, DivisionByZeroError, EvaluationError
from interpreter import EvalOptions, evaluate, run
from ast_nodes import Program
from tests.utils import run_text

PAIRS = [(0, 0), (1, 2), (7, -3), (-7, 3), (-8, -8), (123456, 789), (5, 5)]


@pytest.mark.parametrize("a,b", PAIRS)
def test_arithmetic_matches_python(a, b):
    assert evaluate(add(const(a), const(b))) == a + b
    assert evaluate(sub(const(a), const(b))) == a - b
    assert evaluate(mul(const(a), const(b))) == a * b
    assert evaluate(bit_and(const(a), const(b))) == a & b
    assert evaluate(bit_or(const(a), const(b))) == a | b


@pytest.mark.parametrize(
    "a,b,expected",
    [(7, 2, 3), (-7, 2, -3), (7, -2, -3), (-7, -2, 3), (6, 3, 2), (1, 5, 0), (-1, 5, 0)],
)
def test_division_truncates_toward_zero(a, b, expected):
    assert evaluate(div(const(a), const(b))) == expected


def test_division_by_zero_is_an_error():
    with pytest.raises(DivisionByZeroError):
        evaluate(div(const(1), const(0)))
    # also catchable as the builtin
    with pytest.raises(ZeroDivisionError):
        evaluate(div(var(1), var(2)))


def test_division_by_zero_aborts_run():
    env = Environment()
    prog = Program(root=seq(set_var(1, const(5)), div(const(1), const(0)), set_var(1, const(9))))
    with pytest.raises(DivisionByZeroError):
        run(prog, env=env)
    assert env.get(1) == 5


@pytest.mark.parametrize("a,b", PAIRS)
def test_comparisons_yield_one_or_zero(a, b):
    cases = [(gt, a > b), (lt, a < b), (gte, a >= b), (lte, a <= b), (equ, a == b)]
    for ctor, expected in cases:
        result = evaluate(ctor(const(a), const(b)))
        assert result in (0, 1)
        assert result == int(expected)


def test_equal_operands_for_inclusive_comparisons():
    assert evaluate(equ(const(4), const(4))) == 1
    assert evaluate(gte(const(4), const(4))) == 1
    assert evaluate(lte(const(4), const(4))) == 1
    assert evaluate(gt(const(4), const(4))) == 0
    assert evaluate(lt(const(4), const(4))) == 0


@pytest.mark.parametrize(
    "a,b,and_result,or_result",
    [(1, 1, 1, 1), (1, 0, 0, 1), (0, 1, 0, 1), (0, 0, 0, 0), (-1, 5, 0, 1), (3, -2, 0, 1)],
)
def test_logical_operators_use_positive_truthiness(a, b, and_result, or_result):
    assert evaluate(and_(const(a), const(b))) == and_result
    assert evaluate(or_(const(a), const(b))) == or_result


def test_set_then_get_round_trips():
    env = Environment()
    assert evaluate(set_var(3, const(17)), env) == 17
    assert evaluate(var(3), env) == 17
    assert evaluate(var(4), env) == 0


def test_set_is_an_expression():
    env = Environment()
    # chained assignment: #1 = #2 = 8
    assert evaluate(set_var(1, set_var(2, const(8))), env) == 8
    assert env.bindings() == {1: 8, 2: 8}


def test_seq_returns_last_value_and_runs_first():
    env = Environment()
    assert evaluate(seq(set_var(1, const(2)), add(var(1), const(1))), env) == 3
    assert env.get(1) == 2


def test_operands_evaluated_left_to_right():
    env = Environment()
    # left writes 5, right reads it
    node = sub(set_var(1, const(5)), mul(var(1), const(2)))
    assert evaluate(node, env) == 5 - 10


def test_checked_overflow_raises():
    big = (1 << 63) - 1
    with pytest.raises(ArithmeticOverflowError):
        evaluate(add(const(big), const(1)))
    with pytest.raises(OverflowError):
        evaluate(mul(const(big), const(2)))


def test_min_divided_by_minus_one_overflows():
    lo = -(1 << 63)
    with pytest.raises(ArithmeticOverflowError):
        evaluate(div(const(lo), const(-1)))


def test_wrapping_overflow_policy():
    opts = EvalOptions(overflow="wrap")
    big = (1 << 63) - 1
    assert evaluate(add(const(big), const(1)), options=opts) == -(1 << 63)
    assert evaluate(sub(const(-(1 << 63)), const(1)), options=opts) == big


def test_narrow_word_width():
    opts = EvalOptions(word_bits=8, overflow="wrap")
    assert evaluate(add(const(127), const(1)), options=opts) == -128
    assert evaluate(mul(const(16), const(16)), options=opts) == 0
    with pytest.raises(ArithmeticOverflowError):
        evaluate(add(const(127), const(1)), options=EvalOptions(word_bits=8))


def test_invalid_options_are_rejected():
    with pytest.raises(ValueError):
        EvalOptions(overflow="saturate")
    with pytest.raises(ValueError):
        EvalOptions(word_bits=1)


def test_runtime_errors_carry_source_position():
    from parser import parse_program

    prog = parse_program("(set 1 (0))\n(/ (10) (#1))")
    with pytest.raises(DivisionByZeroError) as excinfo:
        run(prog)
    assert "line 2" in str(excinfo.value)
    assert isinstance(excinfo.value, EvaluationError)


def test_long_statement_chain_does_not_exhaust_the_stack():
    src = "\n".join(["(set 1 (+ (#1) (1)))"] * 1200) + "\n(#1)"
    assert run_text(src) == 1200
