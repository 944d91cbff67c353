from ml_lexer import tokenize, find_calls
from ml_parser import parse_expression, render_expression


def split_multiplicative(expr, trace=None):
    """
    Splits once on the first '*' or '/' met scanning left to right and
    recurses into both sides; text without either operator is emitted as
    written. Additive operators and grouping are passed through for the C
    compiler's own precedence to handle.

        >>> split_multiplicative("a+b*c")
        'a+b * c'
    """
    for i, ch in enumerate(expr):
        if ch in '*/':
            left, right = expr[:i].strip(), expr[i + 1:].strip()
            if trace:
                trace(f"Term - Left term: {left}, Operator: {ch}, Right term: {right}")
            return f"{split_multiplicative(left, trace)} {ch} {split_multiplicative(right, trace)}"
    if trace:
        trace(f"Factor - {expr}")
    return expr


class ExpressionCompiler:
    def __init__(self, context):
        self.context = context

    def trace(self, message):
        self.context.debug("CODE", message)

    def validate(self, expr, lineno):
        """Reports the first invalid character or unmatched parenthesis. Returns False if any."""
        toks, bad_chars = tokenize(expr)
        if bad_chars:
            ch, _ = bad_chars[0]
            self.context.add_error(lineno, f"Invalid character in expression: {ch!r}")
            return False

        open_parens = 0
        for tok in toks:
            if tok.type == 'LPAREN':
                open_parens += 1
            elif tok.type == 'RPAREN':
                open_parens -= 1
                if open_parens < 0:
                    self.context.add_error(lineno, f"Unmatched closing parenthesis in expression: {expr}")
                    return False
        if open_parens != 0:
            self.context.add_error(lineno, f"Unmatched opening parenthesis in expression: {expr}")
            return False
        return True

    def record_calls(self, expr, lineno):
        """Resolves the signature of every known function first called in expr."""
        for call in find_calls(expr):
            func = self.context.functions.get(call.name)
            if func is None:
                continue
            if len(call.args) != len(func.params):
                self.context.add_error(
                    lineno,
                    f"Wrong number of arguments for function '{func.name}': "
                    f"expected {len(func.params)}, received {len(call.args)}")
                continue
            if func.resolve(call.args):
                self.context.debug("CODE", f"Resolved signature: {func.signature()}")

    def compile(self, expr, lineno):
        """Translates an expression to C text, or returns None after reporting an error."""
        expr = expr.strip()
        if not expr:
            self.context.add_error(lineno, "Missing expression")
            return None
        if not self.validate(expr, lineno):
            return None
        self.record_calls(expr, lineno)

        if self.context.config.precedence_mode:
            node, errors = parse_expression(expr)
            if errors:
                for err in errors:
                    self.context.add_error(lineno, f"Invalid expression '{expr}': {err}")
                return None
            return render_expression(node)

        return split_multiplicative(expr, self.trace if self.context.config.verbose else None)
