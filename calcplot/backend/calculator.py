"""
Expression builder for the keypad calculator.

The calculator keeps the expression as display text (with ÷, × and π) and
only converts it to engine syntax when it is computed.
"""
import logging
import re
from typing import Optional

from calcplot.backend.engine import CalculatorEngine, EvalError

logger = logging.getLogger(__name__)

ERROR_TEXT = "Error"

# Keypad operations that open a function call instead of acting as a binary operator.
FUNCTION_PREFIXES = {
    "sin": "sin(",
    "cos": "cos(",
    "tan": "tan(",
    "log": "log10(",
    "√": "sqrt(",
    "ln": "log(",
    "^": "^(",
}

DISPLAY_SUBSTITUTIONS = (
    ("÷", "/"),
    ("×", "*"),
    ("π", "pi"),
)

_NEGATE_SPLIT = re.compile(r"([+\-*/\s()])")
_NUMBER_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _leading_number(text: str) -> Optional[float]:
    """Parse the numeric prefix of text the way a browser's parseFloat would."""
    match = _NUMBER_PREFIX.match(text)
    if not match:
        return None
    return float(match.group(0))


def _number_text(value: float) -> str:
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" in text:
        # 1e-07 -> 1e-7, 1e+21 stays 1e+21
        mantissa, exponent = text.split("e")
        text = f"{mantissa}e{int(exponent):+d}"
    return text


def to_engine_syntax(expression: str) -> str:
    for symbol, replacement in DISPLAY_SUBSTITUTIONS:
        expression = expression.replace(symbol, replacement)
    return expression


class Calculator:
    """Holds the in-progress expression and the label of the last computation."""

    def __init__(self, engine: Optional[CalculatorEngine] = None):
        self.engine = engine or CalculatorEngine()
        self.current = ""
        self.previous = ""

    def _discard_error(self):
        # typing after an error starts a fresh expression
        if self.current == ERROR_TEXT:
            self.current = ""

    def clear(self):
        self.current = ""
        self.previous = ""

    def delete(self):
        self._discard_error()
        self.current = self.current[:-1]

    def append_number(self, number):
        """
        Append a digit, decimal point, constant or parenthesis.
        A '.' gets a leading '0' when no digits were typed for the current
        operand, and is dropped when the operand already has one.
        """
        self._discard_error()
        token = str(number)
        if token == ".":
            if "." in self.current.split(" ")[-1]:
                return
            if self.current == "" or self.current.endswith(" "):
                self.current += "0"
        self.current += token

    def choose_operation(self, operation: str):
        self._discard_error()
        prefix = FUNCTION_PREFIXES.get(operation)
        if prefix is not None:
            self.current += prefix
        else:
            # binary operators stay space-padded so segments can be split on spaces
            self.current += f" {operation} "

    def negate(self):
        """Flip the sign of the last number in the expression."""
        self._discard_error()
        if not self.current:
            return
        parts = _NEGATE_SPLIT.split(self.current)
        for i in range(len(parts) - 1, -1, -1):
            value = _leading_number(parts[i]) if parts[i] else None
            if value is not None:
                parts[i] = _number_text(value * -1)
                self.current = "".join(parts)
                return

    def compute(self):
        """
        Evaluate the expression. On success the expression moves to the
        previous-operand label and the result replaces it; on failure the
        current text becomes "Error".
        """
        expression = to_engine_syntax(self.current)
        try:
            result = self.engine.evaluate(expression)
        except EvalError as e:
            logger.debug("Could not evaluate %r: %s", self.current, e)
            self.current = ERROR_TEXT
            return
        self.previous = f"{self.current} ="
        self.current = self.engine.format_fixed(result, precision=10)
