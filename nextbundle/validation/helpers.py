import numbers
import re
from decimal import Decimal
from typing import Any, Optional


class Invalid(Exception):
    def __init__(self, error_message):
        super().__init__()
        self.error_message = error_message


class ByteSizeSchemaField(object):
    """Converts a possible string with byte extension size into integer with number of bytes.
    Acceptable extensions are 'gb', 'mb', 'kb', 'b' and 'bytes' (case insensitive).
    Also accepts integers, returning the value itself as the number of bytes.

    Example:
        100 -> 100
        "100b" -> 100
        "350 kb" -> 350000
        "1.5MB" -> 1500000
    """

    regex = re.compile(r"^(\d+(?:\.\d+)?)\s*(gb|mb|kb|b|bytes)$")
    extension_multiplier = {"b": 1, "bytes": 1, "kb": 10**3, "mb": 10**6, "gb": 10**9}

    def _validate_str(self, data: str) -> int:
        match = self.regex.match(data.strip().lower())
        if match is None:
            if data.strip().isdigit():
                return int(data.strip())
            raise Invalid(
                "Value doesn't match expected regex. Acceptable extensions are gb, mb, kb, b or bytes"
            )
        size, extension = match.groups()
        return int(Decimal(size) * self.extension_multiplier[extension])

    def validate(self, data: Any) -> Optional[int]:
        if data is None:
            return None
        if isinstance(data, bool):
            raise Invalid("Value should be int or str. Received bool")
        if isinstance(data, int):
            return data
        if isinstance(data, float) and data.is_integer():
            return int(data)
        if isinstance(data, str):
            return self._validate_str(data)
        raise Invalid(f"Value should be int or str. Received {type(data).__name__}")


class PercentSchemaField(object):
    """
    A field for percentages. Accepts both with and without % symbol.
    The end result is the percentage number

    PercentSchemaField().validate('20%') == 20.0
    """

    field_regex = re.compile(r"^\s*(\d+)(\.\d+)?\s*%?\s*$")

    def validate(self, value):
        if value is None:
            return None
        if isinstance(value, bool):
            raise Invalid(f"{value} should be a number")
        if isinstance(value, numbers.Number):
            return float(value)
        if not isinstance(value, str) or not self.field_regex.match(value):
            raise Invalid(f"{value} should be a number")
        return float(value.strip().rstrip("%"))
