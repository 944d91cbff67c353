import os
import sys
import argparse
import subprocess

from ml_context import CompilationContext, TranslatorConfig, file_error
from ml_validate import MAX_FUNCTIONS, MAX_GLOBAL_VARS
from ml_source import LineCursor, read_program
from ml_collector import SymbolCollector
from ml_codegen import run_code_generator

VERSION = "1.0"

CC_FLAGS = ["-std=c11", "-Wall", "-Werror"]
CC_LIBS = ["-lm"]


def display_version():
    print("runml: ML to C translator")
    print(f"Version {VERSION}")


def translate(cursor, filename="<ml>", config=None):
    """
    Runs both passes over a program.
    Returns (c_code, context); c_code is None if any syntax error was found.
    """
    context = CompilationContext(filename, config)
    SymbolCollector(context).first_pass(cursor)
    c_code = run_code_generator(context, cursor)
    if context.has_errors():
        return None, context
    return c_code, context


def translate_text(text, filename="<ml>", config=None):
    return translate(LineCursor.from_text(text), filename, config)


def translate_file(filename, config=None):
    """Like translate(); returns (None, None) when the file cannot be read."""
    try:
        cursor = read_program(filename)
    except OSError:
        file_error(f"Could not open file {filename}")
        return None, None
    if config is not None and config.verbose:
        print(f"@ Debug [INFO] : Opened file {filename}")
    return translate(cursor, filename, config)


def write_c_file(c_code, c_filename):
    try:
        with open(c_filename, 'w', newline='\n') as f:
            f.write(c_code)
    except OSError:
        file_error(f"Could not create C file {c_filename}")
        return False
    return True


def compile_c_program(c_filename, exe_filename, context, cc="cc"):
    cmd = [cc] + CC_FLAGS + ["-o", exe_filename, c_filename] + CC_LIBS
    context.debug("INFO", f"Compiling the C file with command: {' '.join(cmd)}")
    try:
        proc = subprocess.run(cmd)
    except OSError as e:
        file_error(f"Compilation failed for {c_filename}: {e}")
        return False
    if proc.returncode != 0:
        file_error(f"Compilation failed for {c_filename}")
        return False
    return True


def execute_c_program(exe_filename, program_args, context):
    cmd = [os.path.join(os.curdir, exe_filename)] + list(program_args)
    context.debug("INFO", f"Executing the compiled program with command: {' '.join(cmd)}")
    sys.stdout.flush()
    try:
        proc = subprocess.run(cmd)
    except OSError as e:
        file_error(f"Execution failed for {exe_filename}: {e}")
        return False
    if proc.returncode != 0:
        file_error(f"Execution failed for {exe_filename}")
        return False
    return True


def clean_up(context, *paths):
    context.debug("INFO", "Cleaning up temporary files")
    for path in paths:
        if os.path.exists(path):
            os.remove(path)


def build_and_run(c_code, context, program_args=(), cc="cc", keep=False):
    pid = os.getpid()
    c_filename = f"ml_{pid}.c"
    exe_filename = f"ml_{pid}"

    if not write_c_file(c_code, c_filename):
        return 1
    context.debug("INFO", f"Created temporary C file: {c_filename}")
    try:
        if not compile_c_program(c_filename, exe_filename, context, cc):
            return 1
        if not execute_c_program(exe_filename, program_args, context):
            return 1
    finally:
        if not keep:
            clean_up(context, c_filename, exe_filename)
    return 0


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog="runml",
        description="Translates an ML program to C, then compiles and runs it.",
        epilog="Arguments after '--' are passed to the compiled program."
    )
    parser.add_argument('infile', help="The ML source file.")
    parser.add_argument('-v', '--verbose', action='store_true', help="Trace every recognized construct")
    parser.add_argument('--emit-c', action='store_true', help="Only write the translated C file")
    parser.add_argument('-o', '--output', default=None, help="C file to write with --emit-c ('-' for stdout)")
    parser.add_argument('--precedence', action='store_true',
                        help="Parse expressions with full operator precedence and parenthesize the C output")
    parser.add_argument('--keep', action='store_true', help="Keep the temporary C file and binary")
    parser.add_argument('--cc', default="cc", help="C compiler to build with")
    parser.add_argument('--max-functions', type=int, default=MAX_FUNCTIONS)
    parser.add_argument('--max-variables', type=int, default=MAX_GLOBAL_VARS)
    parser.add_argument('--version', action='store_true', help="Print version information and exit")
    return parser


def main(argv=None):
    """Parses command line arguments and runs the translation pipeline."""
    if argv is None:
        argv = sys.argv[1:]
    program_args = []
    if '--' in argv:
        split = argv.index('--')
        argv, program_args = argv[:split], argv[split + 1:]

    if '--version' in argv:
        display_version()
        return 0

    args = build_arg_parser().parse_args(argv)
    config = TranslatorConfig(
        max_functions=args.max_functions,
        max_globals=args.max_variables,
        max_locals=args.max_variables,
        precedence_mode=args.precedence,
        verbose=args.verbose,
    )
    if args.verbose:
        print("@ Debug [INFO] : Verbose mode enabled")

    c_code, context = translate_file(args.infile, config)
    if context is None:
        return 1
    if c_code is None:
        context.report()
        sys.stderr.write("Translation failed due to errors.\n")
        return 1

    if args.emit_c:
        if args.output == '-':
            sys.stdout.write(c_code)
            return 0
        output_filename = args.output or os.path.splitext(args.infile)[0] + ".c"
        if not write_c_file(c_code, output_filename):
            return 1
        print(f"Successfully generated C code at: {output_filename}")
        return 0

    return build_and_run(c_code, context, program_args, cc=args.cc, keep=args.keep)


if __name__ == "__main__":
    sys.exit(main())
