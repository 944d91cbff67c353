import ply.yacc as yacc

import ml_lexer
from ml_lexer import build_lexer

# Parser for the --precedence mode. The default translation never builds a
# tree; see ml_expr.split_multiplicative.


class Node:
    pass


class IdentifierNode(Node):
    def __init__(self, name):
        self.name = name


class LiteralNode(Node):
    def __init__(self, value, literal_type):
        self.value = value
        self.literal_type = literal_type


class BinaryOpNode(Node):
    def __init__(self, left, op, right):
        self.left = left
        self.op = op
        self.right = right


class UnaryOpNode(Node):
    def __init__(self, op, expr):
        self.op = op
        self.expr = expr


class FuncCallNode(Node):
    def __init__(self, name, args):
        self.name = name
        self.args = args


# --- Grammar ---

tokens = ml_lexer.tokens

precedence = (
    ('left', 'PLUS', 'MINUS'),
    ('left', 'STAR', 'SLASH'),
    ('right', 'UMINUS', 'UPLUS'),
)

_parse_errors = []


def p_expression_binop(p):
    '''expression : expression PLUS expression
                  | expression MINUS expression
                  | expression STAR expression
                  | expression SLASH expression'''
    p[0] = BinaryOpNode(p[1], p[2], p[3])


def p_expression_unary(p):
    '''expression : MINUS expression %prec UMINUS
                  | PLUS expression %prec UPLUS'''
    p[0] = UnaryOpNode(p[1], p[2])


def p_expression_group(p):
    'expression : LPAREN expression RPAREN'
    p[0] = p[2]


def p_expression_call(p):
    'expression : IDENTIFIER LPAREN argument_list_opt RPAREN'
    p[0] = FuncCallNode(p[1], p[3])


def p_argument_list_opt(p):
    '''argument_list_opt : argument_list
                         | empty'''
    p[0] = p[1] if p[1] else []


def p_argument_list(p):
    '''argument_list : expression
                     | argument_list COMMA expression'''
    if len(p) == 2:
        p[0] = [p[1]]
    else:
        p[0] = p[1] + [p[3]]


def p_expression_identifier(p):
    'expression : IDENTIFIER'
    p[0] = IdentifierNode(p[1])


def p_expression_literal(p):
    '''expression : INTEGER
                   | REAL'''
    if p[1] == '.':
        _parse_errors.append("Malformed number '.'")
    p[0] = LiteralNode(p[1], p.slice[1].type)


def p_empty(p):
    'empty :'
    pass


def p_error(p):
    if _parse_errors:
        return  # Avoid cascading errors
    if p:
        _parse_errors.append(f"Unexpected token '{p.value}'")
    else:
        _parse_errors.append("Unexpected end of expression")


_parser = None


def build_parser():
    global _parser
    if _parser is None:
        _parser = yacc.yacc(debug=False, write_tables=False,
                            tabmodule='ml_parsetab', errorlog=yacc.NullLogger())
    return _parser


def parse_expression(text):
    """
    Parses an expression into a tree.
    Returns (node, errors); node is None whenever errors is non-empty.
    """
    del _parse_errors[:]
    node = build_parser().parse(text, lexer=build_lexer())
    errors = list(_parse_errors)
    if errors or node is None:
        return None, errors or ["Empty expression"]
    return node, []


# --- Rendering ---

class ExpressionRenderer:
    """Writes a tree back out as C, parenthesizing every operation."""

    def visit(self, node):
        method_name = f'visit_{node.__class__.__name__}'
        visitor = getattr(self, method_name)
        return visitor(node)

    def visit_IdentifierNode(self, node):
        return node.name

    def visit_LiteralNode(self, node):
        return node.value

    def visit_BinaryOpNode(self, node):
        return f"({self.visit(node.left)} {node.op} {self.visit(node.right)})"

    def visit_UnaryOpNode(self, node):
        return f"({node.op}{self.visit(node.expr)})"

    def visit_FuncCallNode(self, node):
        args = ", ".join(self.visit(arg) for arg in node.args)
        return f"{node.name}({args})"


def render_expression(node):
    return ExpressionRenderer().visit(node)
