import re

from ml_validate import (
    check_paren_balance, is_valid_identifier, kinds_consistent, literal_kind,
    name_conflicts_with_function,
)
from ml_types import FunctionDef, ScopeFull
from ml_source import INDENT, is_indented
from ml_codegen import BIND_OP, BIND_RE, CodeEmitter, is_return_statement

FUNCTION_KEYWORD_RE = re.compile(r'^function\b')
FUNCTION_HEADER_RE = re.compile(r'^function\s+([^\s(]+)\s*(?:\(([^()]*)\)|([^()]*))$')
PARAM_SPLIT_RE = re.compile(r'[\s,]+')


def is_function_header(line):
    return FUNCTION_KEYWORD_RE.match(line) is not None


def parse_function_header(line):
    """
    Splits `function name(a, b)` / `function name a b` into (name, params).
    Returns None if the line does not have that shape.
    """
    m = FUNCTION_HEADER_RE.match(line.strip())
    if not m:
        return None
    params_text = m.group(2) if m.group(2) is not None else m.group(3)
    params = [p for p in PARAM_SPLIT_RE.split(params_text.strip()) if p]
    return m.group(1), params


class SymbolCollector:
    """Pass 1: collects function definitions and global variables."""

    def __init__(self, context, emitter=None):
        self.context = context
        self.emitter = emitter if emitter is not None else CodeEmitter(context)

    def first_pass(self, cursor):
        ctx = self.context
        ctx.debug("INFO", "Starting first pass to parse global variables and functions")
        cursor.rewind()
        while not cursor.at_end():
            line = cursor.next_line()
            lineno = cursor.lineno

            if line.startswith('#'):
                continue
            if not check_paren_balance(line):
                ctx.add_error(lineno, f"Unbalanced parentheses in line: {line}")
                ctx.rejected_lines.add(lineno)
                if is_function_header(line):
                    # Still step over the body so it is not read as main code
                    ctx.function_spans[lineno] = self.extract_body(cursor, None)
                continue

            if is_function_header(line):
                self.store_function(line, lineno, cursor)
            elif BIND_OP in line:
                self.store_global(line, lineno)
        cursor.rewind()

    # --- Functions ---

    def store_function(self, line, lineno, cursor):
        func = self.define_function(line, lineno)
        self.context.function_spans[lineno] = self.extract_body(cursor, func)
        if func is not None:
            self.context.debug(
                "CODE", f"Function {func.name}: {len(func.body)} line(s) of body, "
                        f"explicit return: {func.has_return}")

    def define_function(self, line, lineno):
        """Validates a header and registers its FunctionDef. Returns None if rejected."""
        ctx = self.context
        header = parse_function_header(line)
        if header is None:
            ctx.add_error(lineno, f"Invalid function definition: {line}")
            return None
        name, params = header
        ctx.debug("CODE", f"Function definition: {name}({', '.join(params)})")

        if not is_valid_identifier(name):
            ctx.add_error(lineno, f"Invalid function name: {name}")
            return None
        if name in ctx.functions:
            ctx.add_error(lineno, f"Function already defined: {name}")
            return None
        if name in ctx.globals:
            ctx.add_error(lineno, f"Function name conflicts with a variable name: {name}")
            return None
        for param in params:
            if not is_valid_identifier(param):
                ctx.add_error(lineno, f"Invalid parameter in function {name}: {param}")
                return None
        if len(set(params)) != len(params):
            ctx.add_error(lineno, f"Duplicate parameter in function {name}")
            return None
        if len(ctx.functions) >= ctx.config.max_functions:
            ctx.add_error(lineno, f"Too many functions defined, cannot define {name}")
            return None

        func = FunctionDef(name, params, lineno)
        ctx.functions[name] = func
        return func

    def extract_body(self, cursor, func):
        """
        Consumes the indented block after a header and returns the number of
        the last line it consumed. With func None the block is skipped
        without translation.

        A line without indentation ends the block when neither of the two
        lines after it is indented either; otherwise it is dropped and the
        block goes on, reported as an indentation error when the very next
        line is indented. A function header ends the block, also when it is
        the line right after the unindented one.
        """
        ctx = self.context
        name = func.name if func is not None else "?"
        scope = ctx.new_function_scope()
        params = set(func.param_names) if func is not None else set()

        while not cursor.at_end():
            line = cursor.peek()
            if is_indented(line):
                cursor.next_line()
                lineno = cursor.lineno
                stmt = line[len(INDENT):]
                if stmt[:1] in ('\t', ' '):
                    ctx.add_error(lineno, f"Invalid indentation in function '{name}'. "
                                          f"Line has spaces or multiple tabs.")
                    continue
                if func is None:
                    continue
                if is_return_statement(stmt):
                    func.has_return = True
                func.body.extend(self.emitter.translate_statement(stmt, lineno, scope, params))
                continue

            if is_function_header(line):
                break
            following = cursor.peek(1)
            if following is not None and is_function_header(following):
                break
            if not is_indented(cursor.peek(1)) and not is_indented(cursor.peek(2)):
                break
            cursor.next_line()
            if is_indented(cursor.peek()):
                ctx.add_error(cursor.lineno, f"Invalid indentation in function '{name}'. "
                                             f"Line is not indented.")
        return cursor.lineno

    # --- Global Variables ---

    def store_global(self, line, lineno):
        ctx = self.context
        stmt = line.strip()
        m = BIND_RE.match(stmt)
        if not m or not m.group(2).strip():
            ctx.add_error(lineno, f"Invalid assignment: {stmt}")
            ctx.rejected_lines.add(lineno)
            return
        name, value = m.group(1), m.group(2).strip()

        if not is_valid_identifier(name):
            ctx.add_error(lineno, f"Invalid variable name: {name}")
        elif name_conflicts_with_function(name, ctx.functions):
            ctx.add_error(lineno, f"Variable name conflicts with a function name: {name}")
        elif name in ctx.globals:
            var = ctx.globals.lookup(name)
            if kinds_consistent(var.kind, value):
                return
            ctx.add_error(
                lineno,
                f"Type mismatch for variable {name}: expected {var.kind} but got {literal_kind(value)}")
        else:
            try:
                var = ctx.globals.declare(name, value, lineno)
            except ScopeFull:
                ctx.add_error(lineno, f"Too many variables defined, cannot declare {name}")
            else:
                ctx.debug("CODE", f"Global variable {name} has kind {var.kind}")
                return
        ctx.rejected_lines.add(lineno)
