from conftest import ml
from ml_codegen import CodeEmitter


def main_body(c_code):
    start = c_code.index("int main(int argc, char *argv[]) {")
    return [line.strip() for line in c_code[start:].splitlines()[1:-2]]


def test_globals_are_declared_and_assigned_in_main(translate):
    c_code, ctx = translate(ml("x <- 5", "y <- 2.5", "print x*y"))
    assert not ctx.has_errors()
    assert "int x = 0;\ndouble y = 0.0;\n" in c_code
    body = main_body(c_code)
    assert body[:2] == ["x = 5;", "y = 2.5;"]
    assert "temp_value = x * y;" in body


def test_output_layout(translate):
    c_code, _ = translate(ml(
        "function add(a, b)",
        "\treturn a + b",
        "",
        "print add(1, 2)",
    ))
    assert c_code.startswith("#include <stdio.h>\n#include <math.h>\n")
    proto = c_code.index("int add(int a, int b);")
    definition = c_code.index("int add(int a, int b) {")
    assert proto < definition < c_code.index("int main(")
    assert c_code.rstrip().endswith("return 0;\n}")


def test_call_in_main_resolves_signature(translate):
    c_code, ctx = translate(ml(
        "function scale(v, f)",
        "\treturn v * f",
        "",
        "print scale(2.5, 4)",
        "print scale(1, 1)",
    ))
    assert ctx.functions["scale"].signature() == "double scale(double v, int f)"
    assert "double scale(double v, int f) {\n    return v * f;\n}" in c_code


def test_default_return_added_without_explicit_return(translate):
    c_code, _ = translate(ml(
        "function show(v)",
        "\tprint v",
        "",
        "show(3)",
    ))
    assert "void" not in c_code.split("int main")[0]
    assert "    return 0;\n}\n\nint main" in c_code
    assert "show(3);" in main_body(c_code)


def test_never_called_function_uses_real_default(translate):
    c_code, _ = translate(ml("function id(v)", "\treturn v"))
    assert "double id(double v);" in c_code


def test_comments_and_blank_lines_are_skipped(translate):
    c_code, ctx = translate(ml("# setup", "", "x <- 1", "   ", "print x"))
    assert not ctx.has_errors()
    assert main_body(c_code)[0] == "x = 1;"


def test_main_locals_are_declared_once(context, cursor_for):
    emitter = CodeEmitter(context)
    assert emitter.translate_statement("z <- 4", 1, context.locals) == ["int z = 4;"]
    assert emitter.translate_statement("z <- z + 1", 2, context.locals) == ["z = z + 1;"]
    assert emitter.translate_statement("z <- 1.5", 3, context.locals) == []
    assert "Type mismatch for variable z: expected integer but got real" in context.errors[0]
    assert context.locals.lookup("z").kind == "integer"


def test_statement_recognition_order(context):
    emitter = CodeEmitter(context)
    scope = context.locals
    # Bind wins over everything else
    assert emitter.translate_statement("printer <- f(1)", 1, scope) == ["int printer = f(1);"]
    assert emitter.translate_statement("return 2*x", 2, scope) == ["return 2 * x;"]
    assert emitter.translate_statement("foo(1, 2)", 3, scope) == ["foo(1, 2);"]
    assert emitter.translate_statement("print", 4, scope) == []
    assert emitter.translate_statement("x + 1", 5, scope) == []
    assert context.errors[-1] == "! Error [SYNTAX] : test.ml line 5: Unrecognized statement: x + 1"


def test_print_block(context):
    lines = CodeEmitter(context).translate_print("a/b", 1)
    assert lines[0] == "{"
    assert "    temp_value = a / b;" in lines
    assert "    if (fabs(temp_value - (int)temp_value) < 1e-6) {" in lines
    assert '        printf("%d\\n", (int)temp_value);' in lines
    assert '        printf("%.6f\\n", temp_value);' in lines


def test_function_local_scope_is_separate_from_main(translate):
    c_code, ctx = translate(ml(
        "function f(a)",
        "\tt <- a * 2",
        "\treturn t",
        "",
        "t <- 1.5",
        "print f(2) + t",
    ))
    assert not ctx.has_errors()
    assert "    int t = a * 2;" in c_code
    assert "double t = 0.0;" in c_code


def test_errors_are_collected_not_fatal(translate):
    c_code, ctx = translate(ml(
        "x <- 5",
        "x <- 2.5",
        "y <- 3 % 2",
        "1bad <- 4",
        "print (x",
        "what is this",
    ))
    assert c_code is None
    messages = [e.split("test.ml ", 1)[1] for e in ctx.errors]
    assert messages == [
        "line 2: Type mismatch for variable x: expected integer but got real",
        "line 4: Invalid variable name: 1bad",
        "line 5: Unbalanced parentheses in line: print (x",
        "line 3: Invalid character in expression: '%'",
        "line 6: Unrecognized statement: what is this",
    ]


def test_precedence_mode(translate):
    c_code, ctx = translate(ml("a <- 1", "print (a+2)*3-a/4"), precedence_mode=True)
    assert not ctx.has_errors()
    assert "temp_value = (((a + 2) * 3) - (a / 4));" in c_code
