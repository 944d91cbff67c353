import shutil

import pytest

from ml_context import CompilationContext, TranslatorConfig
from ml_source import LineCursor
from runml import translate_text


def ml(*lines):
    """Joins source lines; body lines are written with a literal tab."""
    return "\n".join(lines) + "\n"


@pytest.fixture
def context():
    return CompilationContext("test.ml", TranslatorConfig())


@pytest.fixture
def cursor_for():
    return lambda text: LineCursor.from_text(text)


@pytest.fixture
def translate():
    def _translate(text, **options):
        return translate_text(text, "test.ml", TranslatorConfig(**options))
    return _translate


requires_cc = pytest.mark.skipif(shutil.which("cc") is None, reason="no C compiler on PATH")
