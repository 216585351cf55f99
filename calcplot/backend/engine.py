import ast
import logging
import math
import operator
import re
from typing import Any, Dict, Optional

import numpy as np

logger = logging.getLogger(__name__)

_TOKEN = re.compile(
    r"\s*(?:(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
    r"|(?P<name>[A-Za-z_]\w*)"
    r"|(?P<op>\*\*|[-+*/%(),]))"
)


class EvalError(Exception):
    pass


class SafeEvaluator(ast.NodeVisitor):
    """
    Evaluates a parsed AST expression safely, allowing only numbers, names,
    arithmetic operators and direct calls to whitelisted functions.
    """

    BINOPS = {
        ast.Add: operator.add,
        ast.Sub: operator.sub,
        ast.Mult: operator.mul,
        ast.Div: operator.truediv,
        ast.Mod: operator.mod,
        ast.Pow: math.pow,  # real power only; never builds huge ints or complex numbers
    }

    def __init__(self, funcs: Dict[str, Any], names: Dict[str, Any]):
        self.funcs = funcs
        self.names = names

    def visit(self, node):
        method = "visit_" + node.__class__.__name__
        visitor = getattr(self, method, self.generic_visit)
        return visitor(node)

    def visit_Expression(self, node: ast.Expression):
        return self.visit(node.body)

    def visit_Constant(self, node: ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise EvalError(f"Unsupported constant: {node.value!r}")
        return node.value

    def visit_UnaryOp(self, node: ast.UnaryOp):
        operand = self.visit(node.operand)
        if isinstance(node.op, ast.UAdd):
            return +operand
        if isinstance(node.op, ast.USub):
            return -operand
        raise EvalError(f"Unsupported unary operator: {node.op}")

    def visit_BinOp(self, node: ast.BinOp):
        left = self.visit(node.left)
        right = self.visit(node.right)
        fn = self.BINOPS.get(type(node.op))
        if fn is None:
            raise EvalError(f"Unsupported binary operator: {node.op}")
        try:
            return fn(left, right)
        except ZeroDivisionError:
            raise EvalError("Division by zero")
        except (ValueError, OverflowError) as e:
            raise EvalError(str(e))

    def visit_Call(self, node: ast.Call):
        if not isinstance(node.func, ast.Name):
            raise EvalError("Only direct function calls allowed")
        if node.keywords:
            raise EvalError("Keyword arguments are not supported")
        fname = node.func.id.lower()
        if fname not in self.funcs:
            raise EvalError(f"Unknown function: {fname}")
        args = [self.visit(a) for a in node.args]
        try:
            return self.funcs[fname](*args)
        except TypeError as e:
            raise EvalError(f"Function call error: {e}")
        except (ValueError, OverflowError, ZeroDivisionError) as e:
            raise EvalError(str(e))

    def visit_Name(self, node: ast.Name):
        nid = node.id.lower()
        if nid in self.names:
            return self.names[nid]
        raise EvalError(f"Unknown name: {node.id}")

    def generic_visit(self, node):
        raise EvalError(f"Unsupported expression: {node.__class__.__name__}")


def _log(value, base=None):
    # natural log unless a base is given, like math.js
    if base is None:
        return math.log(value)
    return math.log(value, base)


def insert_implicit_multiplication(expression: str, functions) -> str:
    """
    Re-join the tokens of an expression with an explicit '*' wherever two
    operands touch, as in "2pi", "2sqrt(9)", "2(3)", "(1)(2)" or "3x".
    A known function name directly before '(' stays a call.
    """
    tokens = []
    pos = 0
    prev_kind = prev_text = None
    while pos < len(expression):
        match = _TOKEN.match(expression, pos)
        if match is None:
            raise EvalError(f"Unexpected character: {expression[pos:].lstrip()[:1]!r}")
        kind = match.lastgroup
        text = match.group(kind)

        ends_operand = prev_kind in ("number", "name") or prev_text == ")"
        starts_operand = kind in ("number", "name") or text == "("
        if ends_operand and starts_operand:
            is_call = prev_kind == "name" and text == "(" and prev_text.lower() in functions
            if not is_call and not (prev_kind == "number" and kind == "number"):
                tokens.append("*")

        tokens.append(text)
        prev_kind, prev_text = kind, text
        pos = match.end()
    return " ".join(tokens)


class CalculatorEngine:
    """Evaluates calculator expressions and formats their results."""

    def _prepare_functions(self):
        return {
            "sin": math.sin,
            "cos": math.cos,
            "tan": math.tan,
            "asin": math.asin,
            "acos": math.acos,
            "atan": math.atan,
            "sqrt": math.sqrt,
            "log": _log,
            "log10": math.log10,
            "log2": math.log2,
            "exp": math.exp,
            "abs": abs,
            "round": round,
        }

    def _prepare_names(self, extra: Optional[Dict[str, Any]] = None):
        names = {
            "pi": math.pi,
            "e": math.e,
        }
        if extra:
            for k, v in extra.items():
                names[k.lower()] = v
        return names

    def evaluate(self, expression: str, scope: Optional[Dict[str, Any]] = None) -> float:
        """
        Evaluate an expression string and return a finite float.
        Raises EvalError for anything malformed, undefined or non-finite.
        """
        if not isinstance(expression, str):
            raise EvalError("Expression must be a string")

        expr = expression.strip().replace("^", "**")
        if not expr:
            raise EvalError("Empty expression")

        funcs = self._prepare_functions()
        expr = insert_implicit_multiplication(expr, funcs)
        try:
            node = ast.parse(expr, mode="eval")
        except SyntaxError as e:
            raise EvalError(f"Malformed expression: {e.msg}")
        except (ValueError, MemoryError, RecursionError) as e:
            raise EvalError(f"Expression cannot be parsed: {e.__class__.__name__}")

        evaluator = SafeEvaluator(funcs, self._prepare_names(scope))
        try:
            result = evaluator.visit(node)
        except RecursionError:
            raise EvalError("Expression is nested too deeply")

        try:
            value = float(result)
        except (TypeError, ValueError, OverflowError):
            raise EvalError(f"Result is not a real number: {result!r}")
        if not math.isfinite(value):
            raise EvalError("Result is not finite")
        return value

    def evaluate_for_x(self, expression: str, x_value: float) -> Optional[float]:
        """
        Evaluate expression containing variable 'x'.
        Returns None when the expression cannot be evaluated at this x.
        """
        try:
            return self.evaluate(expression, {"x": x_value})
        except EvalError as e:
            logger.debug("f(%s) undefined for %r: %s", x_value, expression, e)
            return None

    @staticmethod
    def format_fixed(value: float, precision: int = 10) -> str:
        """
        Round to `precision` fractional digits and drop insignificant zeros.
        0.1 + 0.2 -> "0.3", 5.0 -> "5", -1e-12 -> "0".
        """
        rounded = round(float(value), precision) + 0.0  # folds -0.0 into 0.0
        return np.format_float_positional(np.float64(rounded), precision=precision, unique=False,
                                          fractional=True, trim="-")
