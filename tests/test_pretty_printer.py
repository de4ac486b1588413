import pytest

from builder import *
from parser import parse_program
from pretty_printer import PrettyPrinter
from tests.utils import read_example


def test_print_ast_outputs_tree_outline():
    prog = parse_program("(set 1 (+ (#2) (-3)))")
    text = PrettyPrinter.print_ast(prog.root)
    assert text.splitlines()[0] == "SetVar(#1)"
    assert "BinaryOp(+)" in text
    assert "GetVar(#2)" in text
    assert "Const(-3)" in text


def test_print_ast_flattens_sequences():
    text = PrettyPrinter.print_ast(seq(const(1), const(2), const(3)))
    assert text.count("Seq") == 1
    assert "stmt[2]: Const(3)" in text


def test_print_surface_for_single_nodes():
    assert PrettyPrinter.print_surface(const(-4)) == "(-4)"
    assert PrettyPrinter.print_surface(sub(var(1), const(2))) == "(- (#1) (2))"
    assert PrettyPrinter.print_surface(or_(const(1), const(0))) == "(|| (1) (0))"
    assert PrettyPrinter.print_surface(call("F", const(1))) == "(F (1))"


def test_print_surface_rejects_bare_sequence():
    with pytest.raises(ValueError):
        PrettyPrinter.print_surface(seq(const(1), const(2)))


@pytest.mark.parametrize("name", ["factorial.ops", "fibonacci.ops", "sum.ops"])
def test_printed_program_parses_back_to_same_tree(name):
    prog = parse_program(read_example(name))
    text = PrettyPrinter.print_program(prog)
    assert parse_program(text) == prog


def test_print_function_lists_parameters():
    prog = parse_program("(fn Add (A:1 B:2) ((+ (#1) (#2)))) (Add (1) (2))")
    text = PrettyPrinter.print_function(prog.functions["Add"])
    assert text.startswith("FunctionDef(Add, params=[A: #1, B: #2])")
