import re

_PLAIN_INTEGER = re.compile(r"-?\d+")


def format_display(current: str) -> str:
    """
    Render the expression string for the main display.

    A plain number gets thousands separators on its integer part; the
    fractional digits are shown exactly as typed. Anything else (an
    expression still being entered) is shown verbatim.
    """
    text = str(current)
    if text in ("Error", "NaN"):
        return "Error"

    integer_part, dot, decimal_part = text.partition(".")
    if not integer_part:
        return f"0.{decimal_part}" if dot else ""
    if not _PLAIN_INTEGER.fullmatch(integer_part):
        return text

    sign = "-" if integer_part.startswith("-") else ""
    formatted = sign + f"{int(integer_part.lstrip('-')):,}"
    return f"{formatted}.{decimal_part}" if dot else formatted
