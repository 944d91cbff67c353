import re

from ml_validate import (
    is_valid_identifier, kinds_consistent, literal_kind, name_conflicts_with_function,
)
from ml_types import ScopeFull, c_type
from ml_expr import ExpressionCompiler

BIND_OP = "<-"

BIND_RE = re.compile(r'^([^\s<]+)\s*<-\s*(.*)$')
PRINT_RE = re.compile(r'^print(?![A-Za-z0-9_])\s*(.*)$')
RETURN_RE = re.compile(r'^return(?![A-Za-z0-9_])\s*(.*)$')

INCLUDES = ("#include <stdio.h>", "#include <math.h>")


def is_return_statement(stmt):
    return BIND_OP not in stmt and RETURN_RE.match(stmt) is not None


class CodeEmitter:
    def __init__(self, context):
        self.context = context
        self.expressions = ExpressionCompiler(context)
        self.output_lines = []

    # --- Formatting Helpers ---

    def emit(self, line="", indent=0):
        prefix = "    " * indent if line else ""
        self.output_lines.append(f"{prefix}{line}")

    def emit_block(self, lines, indent=0):
        for line in lines:
            self.emit(line, indent)

    # --- Statement Translation ---

    def translate_statement(self, stmt, lineno, scope, params=()):
        """
        Translates one ML statement to a list of C lines, or [] after
        reporting an error. `scope` holds the locals of the enclosing routine
        and `params` the parameter names when inside a function.
        """
        stmt = stmt.strip()
        if BIND_OP in stmt:
            return self.translate_assignment(stmt, lineno, scope, params)

        m = PRINT_RE.match(stmt)
        if m:
            self.context.debug("CODE", f"Print - Expression: {m.group(1)}")
            return self.translate_print(m.group(1), lineno)

        m = RETURN_RE.match(stmt)
        if m:
            self.context.debug("CODE", f"Return - Expression: {m.group(1)}")
            expr = self.expressions.compile(m.group(1), lineno)
            return [] if expr is None else [f"return {expr};"]

        if '(' in stmt and ')' in stmt:
            return self.translate_call(stmt, lineno)

        self.context.add_error(lineno, f"Unrecognized statement: {stmt}")
        return []

    def translate_assignment(self, stmt, lineno, scope, params=()):
        m = BIND_RE.match(stmt)
        if not m or not m.group(2).strip():
            self.context.add_error(lineno, f"Invalid assignment: {stmt}")
            return []
        name, value = m.group(1), m.group(2).strip()
        self.context.debug("CODE", f"Assignment - Identifier: {name}, Expression: {value}")

        if not is_valid_identifier(name):
            self.context.add_error(lineno, f"Invalid variable name: {name}")
            return []
        if name_conflicts_with_function(name, self.context.functions):
            self.context.add_error(lineno, f"Variable name conflicts with a function name: {name}")
            return []

        if name in params:
            expr = self.expressions.compile(value, lineno)
            return [] if expr is None else [f"{name} = {expr};"]

        var = self.context.globals.lookup(name) or scope.lookup(name)
        if var is not None and not kinds_consistent(var.kind, value):
            self.context.add_error(
                lineno,
                f"Type mismatch for variable {name}: expected {var.kind} but got {literal_kind(value)}")
            return []

        expr = self.expressions.compile(value, lineno)
        if expr is None:
            return []
        if var is not None:
            return [f"{name} = {expr};"]

        try:
            var = scope.declare(name, value, lineno)
        except ScopeFull:
            self.context.add_error(lineno, f"Too many variables defined, cannot declare {name}")
            return []
        return [f"{c_type(var.kind)} {name} = {expr};"]

    def translate_print(self, value, lineno):
        expr = self.expressions.compile(value, lineno)
        if expr is None:
            return []
        # Integral results print without a fractional part
        return [
            "{",
            "    double temp_value;",
            f"    temp_value = {expr};",
            "    if (fabs(temp_value - (int)temp_value) < 1e-6) {",
            '        printf("%d\\n", (int)temp_value);',
            "    } else {",
            '        printf("%.6f\\n", temp_value);',
            "    }",
            "}",
        ]

    def translate_call(self, stmt, lineno):
        self.context.debug("CODE", f"Function Call - {stmt}")
        if not self.expressions.validate(stmt, lineno):
            return []
        self.expressions.record_calls(stmt, lineno)
        return [f"{stmt};"]

    # --- Pass 2: Main Routine ---

    def generate_main_code(self, cursor):
        """Translates every top-level statement; function definitions are skipped."""
        ctx = self.context
        ctx.reset_locals()
        lines = []
        cursor.rewind()
        while not cursor.at_end():
            line = cursor.next_line()
            lineno = cursor.lineno

            if lineno in ctx.function_spans:
                cursor.seek(ctx.function_spans[lineno])
                continue
            if lineno in ctx.rejected_lines or not line.strip():
                continue
            if line.startswith('#'):
                ctx.debug("CODE", f"Comment - {line}")
                continue

            lines.extend(self.translate_statement(line, lineno, ctx.locals))
        return lines

    # --- Declarations ---

    def generate_global_variables(self):
        for var in self.context.globals:
            zero = "0.0" if c_type(var.kind) == 'double' else "0"
            self.emit(f"{c_type(var.kind)} {var.name} = {zero};")
        self.emit()

    def generate_function_prototypes(self):
        for func in self.context.functions.values():
            if not func.resolved:
                self.context.debug("INFO", f"Function {func.name} never called, using default kinds")
            self.emit(f"{func.signature()};")
        if self.context.functions:
            self.emit()

    def generate_function_code(self):
        for func in self.context.functions.values():
            self.context.debug("CODE", f"Generating code for function: {func.name}")
            self.emit(f"{func.signature()} {{")
            self.emit_block(func.body, indent=1)
            if not func.has_return:
                self.emit("return 0;", indent=1)
            self.emit("}")
            self.emit()

    # --- Main Generation ---

    def generate(self, cursor):
        """Runs pass 2 and returns the complete C translation unit."""
        self.context.debug("INFO", "Starting second pass to generate C code")
        # Main first, so that its call sites resolve signatures before the
        # prototypes are written.
        main_lines = self.generate_main_code(cursor)

        self.output_lines = []
        for include in INCLUDES:
            self.emit(include)
        self.emit()
        self.generate_global_variables()
        self.generate_function_prototypes()
        self.generate_function_code()

        self.emit("int main(int argc, char *argv[]) {")
        self.emit_block(main_lines, indent=1)
        self.emit("return 0;", indent=1)
        self.emit("}")
        return "\n".join(self.output_lines) + "\n"


def run_code_generator(context, cursor):
    return CodeEmitter(context).generate(cursor)
