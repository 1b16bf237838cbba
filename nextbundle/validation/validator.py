from cerberus import Validator

from nextbundle.validation.helpers import ByteSizeSchemaField, PercentSchemaField


class OptionsValidator(Validator):
    def _normalize_coerce_byte_size(self, value):
        return ByteSizeSchemaField().validate(value)

    def _normalize_coerce_percentage_to_number(self, value):
        return PercentSchemaField().validate(value)


byte_size_structure = {
    "type": "integer",
    "coerce": "byte_size",
    "nullable": True,
    "min": 0,
}

options_schema = {
    "name": {"type": "string", "coerce": str, "empty": False},
    "budget": {**byte_size_structure, "min": 1},
    "budget_percent_increase_red": {
        "type": "float",
        "coerce": "percentage_to_number",
        "min": 0,
    },
    "minimum_change_threshold": byte_size_structure,
    "show_details": {"type": "boolean"},
    "build_output_directory": {"type": "string", "coerce": str, "empty": False},
    "skip_comment_if_empty": {"type": "boolean"},
    "show_removed_pages": {"type": "boolean"},
    "sentry_dsn": {"type": "string", "nullable": True},
}
