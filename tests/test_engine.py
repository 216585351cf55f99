import math

import pytest

from calcplot.backend.engine import CalculatorEngine, EvalError, insert_implicit_multiplication


def test_evaluate_basic_expression(engine):
    assert engine.evaluate("2 + 3 * 4") == 14


def test_caret_is_power(engine):
    assert engine.evaluate("2 ^ 3") == 8.0


def test_trig_uses_radians(engine):
    assert engine.evaluate("sin(pi / 2)") == pytest.approx(1.0)
    assert engine.evaluate("cos(0)") == pytest.approx(1.0)


def test_log_is_natural_and_log10_is_base_ten(engine):
    assert engine.evaluate("log(e)") == pytest.approx(1.0)
    assert engine.evaluate("log10(1000)") == pytest.approx(3.0)
    assert engine.evaluate("log(8, 2)") == pytest.approx(3.0)


def test_unary_minus_chain(engine):
    assert engine.evaluate("3 + -4") == -1
    assert engine.evaluate("3 + --4") == 7


def test_scope_binds_variables(engine):
    assert engine.evaluate("x ^ 2 + 1", {"x": 3}) == 10


@pytest.mark.parametrize("expression", [
    "2 / 0",
    "log10(-1)",
    "sqrt(-4)",
    "(-8) ^ (1 / 3)",
    "10 ^ 400",
    "1 +",
    "",
    "foo(2)",
    "y + 1",
    "(1, 2)",
    "__import__('os').system('echo')",
    "'text'",
])
def test_invalid_expressions_raise(engine, expression):
    with pytest.raises(EvalError):
        engine.evaluate(expression)


def test_evaluate_for_x_returns_none_when_undefined(engine):
    assert engine.evaluate_for_x("1 / x", 0.0) is None
    assert engine.evaluate_for_x("1 / x", 4.0) == 0.25


def test_format_fixed_drops_float_noise():
    assert CalculatorEngine.format_fixed(0.1 + 0.2) == "0.3"
    assert CalculatorEngine.format_fixed(1 / 3) == "0.3333333333"


def test_format_fixed_integers_and_signs():
    assert CalculatorEngine.format_fixed(5.0) == "5"
    assert CalculatorEngine.format_fixed(1234567.0) == "1234567"
    assert CalculatorEngine.format_fixed(-2.5) == "-2.5"
    assert CalculatorEngine.format_fixed(-1e-12) == "0"


def test_format_fixed_never_uses_exponent():
    text = CalculatorEngine.format_fixed(1e22)
    assert "e" not in text
    assert float(text) == pytest.approx(1e22)
    assert math.isclose(float(CalculatorEngine.format_fixed(2 ** 0.5)), 1.4142135624)


@pytest.mark.parametrize("expression, expected", [
    ("2pi", 2 * math.pi),
    ("2sqrt(9)", 6.0),
    ("2(3)", 6.0),
    ("(1 + 1)(2)", 4.0),
    ("2e", 2 * math.e),
    ("3 log10(100)", 6.0),
    ("1e3", 1000.0),
    ("2.5e-1", 0.25),
])
def test_implicit_multiplication(engine, expression, expected):
    assert engine.evaluate(expression) == pytest.approx(expected)


def test_implicit_multiplication_with_variable(engine):
    assert engine.evaluate_for_x("2x + 1", 3.0) == 7.0
    assert engine.evaluate_for_x("3sin(x)", math.pi / 2) == pytest.approx(3.0)
    assert engine.evaluate_for_x("x(x + 1)", 2.0) == 6.0


def test_function_calls_are_not_multiplied(engine):
    funcs = engine._prepare_functions()
    assert insert_implicit_multiplication("sqrt(9)", funcs) == "sqrt ( 9 )"
    assert insert_implicit_multiplication("2sqrt(9)", funcs) == "2 * sqrt ( 9 )"
    assert insert_implicit_multiplication("SIN(x)", funcs) == "SIN ( x )"


def test_adjacent_numbers_stay_an_error(engine):
    with pytest.raises(EvalError):
        engine.evaluate("2 3")


def test_unknown_characters_raise(engine):
    with pytest.raises(EvalError):
        engine.evaluate("2 $ 3")


@pytest.mark.parametrize("expression", [
    "-" * 200000 + "1",
    "(" * 500 + "1" + ")" * 500,
])
def test_pathologically_nested_input_raises_eval_error(engine, expression):
    with pytest.raises(EvalError):
        engine.evaluate(expression)
    assert engine.evaluate_for_x(expression, 1.0) is None
