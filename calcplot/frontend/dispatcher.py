"""
Maps keypad buttons and keyboard keys onto Calculator operations.

Key names follow the browser convention ("Enter", "Backspace", "Escape",
single characters for everything printable) so the mapping stays
independent of the toolkit; key_from_tk() converts Tk events.
"""
from typing import Callable, Optional

from calcplot.backend.calculator import Calculator

OPERATOR_KEYS = {
    "+": "+",
    "-": "-",
    "*": "*",
    "/": "÷",
    "^": "^",
}

TK_KEYSYMS = {
    "Return": "Enter",
    "KP_Enter": "Enter",
    "BackSpace": "Backspace",
    "Escape": "Escape",
}


def key_from_tk(keysym: str, char: str) -> str:
    """Translate a Tk (keysym, char) pair to a browser-style key name."""
    if keysym in TK_KEYSYMS:
        return TK_KEYSYMS[keysym]
    return char or keysym


class InputDispatcher:
    def __init__(self, calculator: Calculator, refresh: Optional[Callable[[], None]] = None):
        self.calculator = calculator
        self.refresh = refresh or (lambda: None)

    # -------------------------
    # Keypad buttons
    # -------------------------
    def press_number(self, label: str):
        self.calculator.append_number(label)
        self.refresh()

    def press_constant(self, label: str):
        self.calculator.append_number(label)
        self.refresh()

    def press_operation(self, label: str):
        self.calculator.choose_operation(label)
        self.refresh()

    def press_negate(self):
        self.calculator.negate()
        self.refresh()

    def press_equals(self):
        self.calculator.compute()
        self.refresh()

    def press_delete(self):
        self.calculator.delete()
        self.refresh()

    def press_clear(self):
        self.calculator.clear()
        self.refresh()

    # -------------------------
    # Keyboard
    # -------------------------
    def handle_key(self, key: str, editing_formula: bool = False) -> bool:
        """
        Apply a key press. Returns True when the key's default action
        (form submit, text entry) must be suppressed.
        Keys typed while the plot formula is being edited belong to that
        entry and leave the calculator alone.
        """
        if editing_formula:
            return False
        suppress = False
        if len(key) == 1 and ("0" <= key <= "9" or key == "."):
            self.calculator.append_number(key)
        elif key in ("Enter", "="):
            self.calculator.compute()
            suppress = True
        elif key == "Backspace":
            self.calculator.delete()
        elif key == "Escape":
            self.calculator.clear()
        elif key in OPERATOR_KEYS:
            self.calculator.choose_operation(OPERATOR_KEYS[key])
            suppress = True
        self.refresh()
        return suppress
