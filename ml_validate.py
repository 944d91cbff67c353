import re

# --- Language Limits ---

MAX_IDENTIFIER_LENGTH = 12
MAX_FUNCTIONS = 50
MAX_GLOBAL_VARS = 50
MAX_LOCAL_VARS = 50

K_INT = "integer"
K_REAL = "real"

_IDENTIFIER_RE = re.compile(r'[A-Za-z][A-Za-z0-9_]*\Z')


def check_paren_balance(line):
    """Returns False on a premature ')' or if the counts do not match at the end."""
    open_parens = 0
    for ch in line:
        if ch == '(':
            open_parens += 1
        elif ch == ')':
            open_parens -= 1
            if open_parens < 0:
                return False
    return open_parens == 0


def is_valid_identifier(name):
    if not name or len(name) > MAX_IDENTIFIER_LENGTH:
        return False
    return _IDENTIFIER_RE.match(name) is not None


def literal_kind(expr):
    """
    Infers the kind of an expression from its text: anything containing a
    '.' is real, everything else is integer. Only the shape of the text is
    looked at, so `x + 1.0` is real and `y` is integer whatever y holds.
    """
    return K_REAL if '.' in expr else K_INT


def kinds_consistent(declared_kind, expr):
    return literal_kind(expr) == declared_kind


def name_conflicts_with_function(name, functions):
    return name in functions
