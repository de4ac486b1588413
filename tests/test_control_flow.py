"""Branching, iteration and the non-short-circuit logical operators."""

from builder import *
from environment import Environment
from interpreter import evaluate
from tests.utils import run_text


def test_and_evaluates_right_operand_even_when_left_is_false():
    env = Environment()
    node = and_(const(0), set_var(1, const(7)))
    assert evaluate(node, env) == 0
    assert env.get(1) == 7


def test_or_evaluates_right_operand_even_when_left_is_true():
    env = Environment()
    node = or_(const(1), set_var(2, const(9)))
    assert evaluate(node, env) == 1
    assert env.get(2) == 9


def test_logical_operands_run_left_to_right():
    env = Environment()
    node = or_(set_var(1, const(3)), set_var(1, const(4)))
    evaluate(node, env)
    assert env.get(1) == 4


def test_or_is_a_real_disjunction():
    assert run_text("(|| (0) (1))") == 1
    assert run_text("(&& (0) (1))") == 0


def test_if_else_runs_only_the_taken_branch():
    env = Environment()
    node = if_else(const(1), set_var(1, const(10)), set_var(2, const(20)))
    assert evaluate(node, env) == 10
    assert env.bindings() == {1: 10}

    env = Environment()
    node = if_else(const(0), set_var(1, const(10)), set_var(2, const(20)))
    assert evaluate(node, env) == 20
    assert env.bindings() == {2: 20}


def test_if_condition_uses_positive_truthiness():
    assert evaluate(if_else(const(-1), const(1), const(2))) == 2
    assert evaluate(if_else(const(5), const(1), const(2))) == 1


def test_if_branch_statement_lists():
    env = Environment()
    node = if_else(const(1), [set_var(1, const(1)), set_var(2, const(2)), const(3)], [const(0)])
    assert evaluate(node, env) == 3
    assert env.bindings() == {1: 1, 2: 2}


def test_range_iterates_in_order_and_returns_zero():
    env = Environment()
    # #2 = #2 * 10 + #1 records the visiting order of #1
    node = range_(1, const(2), const(6), set_var(2, add(mul(var(2), const(10)), var(1))))
    assert evaluate(node, env) == 0
    assert env.get(2) == 2345
    assert env.get(1) == 5


def test_range_iteration_count():
    env = Environment()
    node = range_(1, const(-3), const(4), set_var(2, add(var(2), const(1))))
    evaluate(node, env)
    assert env.get(2) == 7


def test_empty_range_runs_no_iterations():
    for lo, hi in [(5, 5), (6, 2)]:
        env = Environment()
        node = range_(1, const(lo), const(hi), set_var(2, const(1)))
        assert evaluate(node, env) == 0
        assert env.bindings() == {}


def test_range_bounds_are_evaluated_once():
    env = Environment()
    # the upper bound bumps #9 each time it is evaluated
    stop = seq(set_var(9, add(var(9), const(1))), const(3))
    node = range_(1, const(0), stop, set_var(2, add(var(2), const(1))))
    evaluate(node, env)
    assert env.get(9) == 1
    assert env.get(2) == 3


def test_range_body_writes_to_loop_variable_do_not_change_iteration():
    env = Environment()
    node = range_(1, const(0), const(3), [set_var(1, const(100)), set_var(2, add(var(2), const(1)))])
    evaluate(node, env)
    assert env.get(2) == 3
    assert env.get(1) == 100


def test_range_loop_variable_shares_environment():
    assert run_text("(set 1 (0)) (range 1 (0) (4) ((0))) (#1)") == 3
