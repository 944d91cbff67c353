from ml_parser import (
    BinaryOpNode, FuncCallNode, LiteralNode, parse_expression, render_expression,
)


def test_multiplication_binds_tighter():
    node, errors = parse_expression("1 + 2 * 3")
    assert errors == []
    assert isinstance(node, BinaryOpNode) and node.op == '+'
    assert isinstance(node.right, BinaryOpNode) and node.right.op == '*'


def test_left_associative():
    node, _ = parse_expression("a - b - c")
    assert render_expression(node) == "((a - b) - c)"


def test_grouping_is_kept():
    node, _ = parse_expression("(a + b) * c")
    assert render_expression(node) == "((a + b) * c)"


def test_call_arguments():
    node, _ = parse_expression("f(1.5, g())")
    assert isinstance(node, FuncCallNode)
    assert isinstance(node.args[0], LiteralNode) and node.args[0].literal_type == 'REAL'
    assert render_expression(node) == "f(1.5, g())"


def test_syntax_errors():
    node, errors = parse_expression("a + * b")
    assert node is None
    assert errors == ["Unexpected token '*'"]

    node, errors = parse_expression("a +")
    assert node is None
    assert errors == ["Unexpected end of expression"]


def test_lone_dot_is_not_a_number():
    node, errors = parse_expression("1 + .")
    assert node is None
    assert errors == ["Malformed number '.'"]


def test_errors_do_not_leak_between_parses():
    parse_expression("a +")
    node, errors = parse_expression("a + 1")
    assert errors == []
    assert render_expression(node) == "(a + 1)"
