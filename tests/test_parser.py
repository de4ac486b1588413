import pytest

from tests.utils import parse_text
from parser import parse_program
from ast_nodes import *
from errors import ProgramError, UnresolvedReferenceError


def test_parser_builds_seq_chain_for_top_level_statements():
    prog = parse_text("(set 1 (5)) (set 2 (6)) (#1)")
    root = prog.root
    assert isinstance(root, SeqNode)
    assert root.first == SetVarNode(var_id=1, value=ConstNode(value=5))
    assert isinstance(root.rest, SeqNode)
    assert root.rest.rest == GetVarNode(var_id=1)


def test_single_statement_is_not_wrapped_in_seq():
    prog = parse_text("(42)")
    assert prog.root == ConstNode(value=42)


def test_parser_maps_operators_to_node_kinds():
    prog = parse_text("(+ (1) (2)) (>= (1) (2)) (|| (1) (0)) (& (6) (3))")
    stmts = []
    node = prog.root
    while isinstance(node, SeqNode):
        stmts.append(node.first)
        node = node.rest
    stmts.append(node)

    assert isinstance(stmts[0], BinaryOpNode) and stmts[0].operator == Operator.ADD
    assert isinstance(stmts[1], CompareNode) and stmts[1].operator == Operator.GTE
    assert isinstance(stmts[2], LogicalNode) and stmts[2].operator == Operator.OR
    assert isinstance(stmts[3], BinaryOpNode) and stmts[3].operator == Operator.BIT_AND


def test_parser_parses_function_definition():
    prog = parse_text("(fn Add (A:1 B:2) ((+ (#1) (#2)))) (Add (1) (2))")
    add = prog.functions["Add"]
    assert add.params == (Parameter("A", 1), Parameter("B", 2))
    assert add.body == BinaryOpNode(
        left=GetVarNode(var_id=1), operator=Operator.ADD, right=GetVarNode(var_id=2)
    )
    assert prog.root == CallNode(
        func_name="Add", arguments=(ConstNode(value=1), ConstNode(value=2))
    )


def test_parser_if_and_range_shapes():
    prog = parse_text("(if (1) ((set 1 (2)) (#1)) ((0))) (range 3 (0) (4) ((#3)))")
    if_node = prog.root.first
    assert isinstance(if_node, IfElseNode)
    assert isinstance(if_node.then_branch, SeqNode)
    assert if_node.else_branch == ConstNode(value=0)

    range_node = prog.root.rest
    assert isinstance(range_node, RangeNode)
    assert range_node.var_id == 3
    assert range_node.body == GetVarNode(var_id=3)


def test_parser_records_source_positions():
    prog = parse_text("\n  (set 1 (5))")
    assert (prog.root.line, prog.root.column) == (2, 3)


def test_functions_may_be_used_before_definition():
    prog = parse_program("(Twice (4)) (fn Twice (X:1) ((* (#1) (2))))")
    assert "Twice" in prog.functions


def test_parser_rejects_nested_function_definition():
    with pytest.raises(SyntaxError):
        parse_text("(fn F () ((fn G () ((1))))) (F)")


def test_parser_rejects_duplicate_function():
    with pytest.raises(ProgramError):
        parse_text("(fn F () ((1))) (fn F () ((2))) (F)")


def test_parser_rejects_empty_program_and_empty_block():
    with pytest.raises(SyntaxError):
        parse_text("(fn F () ((1)))")
    with pytest.raises(SyntaxError):
        parse_text("(if (1) () ((2)))")


def test_parser_rejects_unbalanced_parens():
    with pytest.raises(SyntaxError):
        parse_text("(+ (1) (2)")


def test_parser_rejects_negative_variable_id():
    with pytest.raises(SyntaxError):
        parse_text("(#-1)")


def test_parse_program_rejects_unknown_function():
    with pytest.raises(UnresolvedReferenceError):
        parse_program("(Missing (1))")
