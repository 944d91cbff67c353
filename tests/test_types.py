import pytest

from ml_types import FunctionDef, K_UNRESOLVED, Scope, ScopeFull, c_type
from ml_validate import K_INT, K_REAL


def test_kind_to_c_type():
    assert c_type(K_INT) == 'int'
    assert c_type(K_REAL) == 'double'
    assert c_type(K_UNRESOLVED) == 'double'


def test_unresolved_function_renders_with_default_kind():
    func = FunctionDef("area", ["w", "h"])
    assert func.return_kind == K_UNRESOLVED
    assert func.signature() == "double area(double w, double h)"


def test_zero_parameter_function():
    func = FunctionDef("seed", [])
    assert func.resolve([])
    assert func.effective_return_kind == K_REAL
    assert func.signature() == "double seed(void)"


def test_resolution_is_positional_and_frozen():
    func = FunctionDef("mix", ["a", "b"])
    assert func.resolve(["1", "2.5"])
    assert func.signature() == "int mix(int a, double b)"
    assert not func.resolve(["1.0", "2"])
    assert func.signature() == "int mix(int a, double b)"


def test_return_kind_mirrors_first_parameter():
    func = FunctionDef("half", ["x"])
    func.resolve(["3.0"])
    assert func.return_kind == K_REAL


def test_scope_infers_and_keeps_kind():
    scope = Scope()
    var = scope.declare("x", "5")
    assert var.kind == K_INT
    assert scope.lookup("x") is var
    assert [v.name for v in scope] == ["x"]


def test_scope_capacity():
    scope = Scope(capacity=1)
    scope.declare("a", "1")
    with pytest.raises(ScopeFull):
        scope.declare("b", "2")

