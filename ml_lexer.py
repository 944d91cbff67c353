import ply.lex as lex

# --- Token Definitions for ML Expressions ---
# Only the characters an expression may legally contain have a rule; anything
# else lands in t_error and is reported as an invalid character.

tokens = [
    'IDENTIFIER', 'INTEGER', 'REAL',
    'PLUS', 'MINUS', 'STAR', 'SLASH',
    'LPAREN', 'RPAREN', 'COMMA',
]

# Spaces only. A tab inside an expression is an invalid character.
t_ignore = ' '


def t_IDENTIFIER(t):
    r'[A-Za-z][A-Za-z0-9]*'
    return t


def t_REAL(t):
    r'\d*\.\d*'
    return t


def t_INTEGER(t):
    r'\d+'
    return t


t_PLUS   = r'\+'
t_MINUS  = r'-'
t_STAR   = r'\*'
t_SLASH  = r'/'
t_LPAREN = r'\('
t_RPAREN = r'\)'
t_COMMA  = r','


def t_error(t):
    t.lexer.bad_chars.append((t.value[0], t.lexpos))
    t.lexer.skip(1)


_base_lexer = None


def build_lexer():
    """Returns a fresh lexer; the rule tables are only compiled once."""
    global _base_lexer
    if _base_lexer is None:
        _base_lexer = lex.lex()
    lexer = _base_lexer.clone()
    lexer.bad_chars = []
    return lexer


def tokenize(text):
    """
    Splits an expression into tokens.
    Returns (tokens, bad_chars) where bad_chars lists (char, offset) pairs
    for every character no rule accepts.
    """
    lexer = build_lexer()
    lexer.input(text)
    toks = []
    while True:
        tok = lexer.token()
        if not tok:
            break
        toks.append(tok)
    return toks, lexer.bad_chars


class CallSite:
    def __init__(self, name, args):
        self.name = name
        self.args = args  # argument texts, stripped

    def __repr__(self):
        return f"CallSite({self.name!r}, {self.args!r})"


def find_calls(text):
    """
    Finds every `name(...)` in an expression, nested calls included, in order
    of appearance. Arguments are split on top-level commas only.
    Text with unbalanced parentheses yields only the complete calls.
    """
    toks, _ = tokenize(text)
    calls = []
    for i, tok in enumerate(toks[:-1]):
        if tok.type != 'IDENTIFIER' or toks[i + 1].type != 'LPAREN':
            continue
        depth = 0
        start = toks[i + 1].lexpos + 1
        args = []
        closed = False
        for inner in toks[i + 1:]:
            if inner.type == 'LPAREN':
                depth += 1
            elif inner.type == 'RPAREN':
                depth -= 1
                if depth == 0:
                    args.append(text[start:inner.lexpos])
                    closed = True
                    break
            elif inner.type == 'COMMA' and depth == 1:
                args.append(text[start:inner.lexpos])
                start = inner.lexpos + 1
        if not closed:
            continue
        args = [a.strip() for a in args]
        if args == ['']:
            args = []
        calls.append(CallSite(tok.value, args))
    return calls
