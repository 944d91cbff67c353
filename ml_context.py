import sys
from dataclasses import dataclass

from ml_validate import MAX_FUNCTIONS, MAX_GLOBAL_VARS, MAX_LOCAL_VARS
from ml_types import Scope

SYNTAX = "SYNTAX"
FILE = "FILE"


@dataclass
class TranslatorConfig:
    max_functions: int = MAX_FUNCTIONS
    max_globals: int = MAX_GLOBAL_VARS
    max_locals: int = MAX_LOCAL_VARS
    precedence_mode: bool = False
    verbose: bool = False


def format_error(category, message, filename=None, lineno=None):
    where = ""
    if filename and lineno:
        where = f"{filename} line {lineno}: "
    elif filename:
        where = f"{filename}: "
    return f"! Error [{category}] : {where}{message}"


def file_error(message):
    """Reports a file/process error right away; there is nothing to collect it into."""
    sys.stderr.write(format_error(FILE, message) + "\n")


class CompilationContext:
    """
    State for a single translation run: the symbol tables, the collected
    diagnostics and the trace switch. Every pass reads and writes it.
    """

    def __init__(self, filename="<ml>", config=None):
        self.filename = filename
        self.config = config if config is not None else TranslatorConfig()

        self.functions = {}
        self.globals = Scope(capacity=self.config.max_globals)
        self.locals = Scope(capacity=self.config.max_locals)

        # Header line -> last line of the function, as found in pass 1
        self.function_spans = {}
        # Lines pass 1 already rejected; pass 2 skips them silently
        self.rejected_lines = set()

        self.errors = []
        self._seen = set()

    # --- Diagnostics ---

    def add_error(self, lineno, message, category=SYNTAX):
        key = (category, lineno, message)
        if key in self._seen:
            return
        self._seen.add(key)
        self.errors.append(format_error(category, message, self.filename, lineno))

    def has_errors(self):
        return bool(self.errors)

    def report(self, stream=None):
        stream = stream if stream is not None else sys.stderr
        for err in self.errors:
            stream.write(err + "\n")

    def debug(self, kind, message):
        if self.config.verbose:
            print(f"@ Debug [{kind}] : {message}")

    # --- Symbols ---

    def reset_locals(self):
        self.locals = Scope(capacity=self.config.max_locals)

    def new_function_scope(self):
        return Scope(capacity=self.config.max_locals)
