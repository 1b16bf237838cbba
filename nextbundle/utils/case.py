import re

_camel_boundary = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def camel_to_snake_case(camel: str) -> str:
    return _camel_boundary.sub("_", camel).lower()
