from ml_validate import K_INT, K_REAL, literal_kind

# --- Kind System ---

K_UNRESOLVED = "unresolved"

# Kind used when a function signature was never resolved.
DEFAULT_KIND = K_REAL

C_TYPE_MAP = {
    K_INT: 'int',
    K_REAL: 'double',
    K_UNRESOLVED: 'double',
}


def c_type(kind):
    return C_TYPE_MAP.get(kind, 'double')


# --- Symbols ---

class Variable:
    def __init__(self, name, kind, lineno=0):
        self.name = name
        self.kind = kind
        self.lineno = lineno

    def __repr__(self):
        return f"Variable({self.name!r}, {self.kind!r})"


class Parameter:
    def __init__(self, name):
        self.name = name
        self.kind = K_UNRESOLVED

    @property
    def effective_kind(self):
        return DEFAULT_KIND if self.kind == K_UNRESOLVED else self.kind


class FunctionDef:
    """
    A function collected in pass 1. Its signature starts unresolved and is
    fixed by the first call site seen (see resolve()); after that it never
    changes.
    """

    def __init__(self, name, params, lineno=0):
        self.name = name
        self.params = [Parameter(p) for p in params]
        self.return_kind = K_UNRESOLVED
        self.body = []
        self.has_return = False
        self.resolved = False
        self.lineno = lineno

    @property
    def param_names(self):
        return [p.name for p in self.params]

    @property
    def effective_return_kind(self):
        return DEFAULT_KIND if self.return_kind == K_UNRESOLVED else self.return_kind

    def resolve(self, arg_exprs):
        """
        Fixes parameter kinds from the argument texts of a call, matched by
        position, and makes the return kind follow the first parameter.
        Returns False if the signature had already been resolved.
        """
        if self.resolved:
            return False
        for param, arg in zip(self.params, arg_exprs):
            param.kind = literal_kind(arg)
        if self.params and self.params[0].kind != K_UNRESOLVED:
            self.return_kind = self.params[0].kind
        self.resolved = True
        return True

    def signature(self):
        ret = c_type(self.effective_return_kind)
        if not self.params:
            return f"{ret} {self.name}(void)"
        params = ", ".join(f"{c_type(p.effective_kind)} {p.name}" for p in self.params)
        return f"{ret} {self.name}({params})"


class ScopeFull(Exception):
    pass


class Scope:
    """Insertion-ordered name -> Variable table with an optional capacity."""

    def __init__(self, capacity=None):
        self.symbols = {}
        self.capacity = capacity

    def __contains__(self, name):
        return name in self.symbols

    def __iter__(self):
        return iter(self.symbols.values())

    def is_full(self):
        return self.capacity is not None and len(self.symbols) >= self.capacity

    def declare(self, name, expr, lineno=0):
        """Adds a variable whose kind is inferred, once and for good, from expr."""
        if self.is_full():
            raise ScopeFull(name)
        var = Variable(name, literal_kind(expr), lineno)
        self.symbols[name] = var
        return var

    def lookup(self, name):
        return self.symbols.get(name)
