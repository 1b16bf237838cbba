import math
import re

import inflect

NON_BREAKING_SPACE = "\u00a0"

SIZE_SYMBOLS = ["B", "kB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]

_inflect = inflect.engine()


def _format_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def filesize(size: int, spacer: str = NON_BREAKING_SPACE) -> str:
    """
    Renders a number of bytes as a human readable, base 10 size.

    Examples:
        filesize(55) == "55 B"
        filesize(1500) == "1.5 kB"
        filesize(-2000000) == "-2 MB"

    The number and the symbol are separated by a non breaking space by default,
    so that table cells never wrap in between them.
    """
    magnitude = abs(size)
    exponent = 0
    if magnitude > 0:
        exponent = min(int(math.log(magnitude, 1000)), len(SIZE_SYMBOLS) - 1)
        # math.log can land just under an integer for exact powers of 1000
        if exponent + 1 < len(SIZE_SYMBOLS) and magnitude >= 1000 ** (exponent + 1):
            exponent += 1
    value = round(magnitude / 1000**exponent, 2)
    if value == 1000 and exponent + 1 < len(SIZE_SYMBOLS):
        exponent += 1
        value = 1.0
    sign = "-" if size < 0 else ""
    return f"{sign}{_format_number(value)}{spacer}{SIZE_SYMBOLS[exponent]}"


def number_to_words(number: int) -> str:
    """
    Spells out a whole number in english words, without the british "and",
    e.g. 21 -> "twenty-one", 1205 -> "one thousand, two hundred five".
    """
    return _inflect.number_to_words(number, andword="")


def title_case(text: str) -> str:
    return re.sub(
        r"\w\S*", lambda match: match[0][0].upper() + match[0][1:].lower(), text
    )
