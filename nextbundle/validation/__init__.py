import logging

from nextbundle.validation.exceptions import InvalidConfigException
from nextbundle.validation.validator import OptionsValidator, options_schema

log = logging.getLogger(__name__)


def _calculate_error_location_and_message_from_error_dict(error_dict):
    current_value, location_so_far = error_dict, []
    steps_done = 0
    # max depth to avoid being put in a loop
    while steps_done < 20:
        if isinstance(current_value, list) and len(current_value) > 0:
            current_value = current_value[0]
        if isinstance(current_value, dict) and len(current_value) > 0:
            first_key, first_value = next(iter((current_value.items())))
            location_so_far.append(first_key)
            current_value = first_value
        if isinstance(current_value, str):
            return location_so_far, current_value
        steps_done += 1
    return location_so_far, str(current_value)


def validate_options(inputted_dict):
    """Validates and normalizes the bundle analysis options.

    Args:
        inputted_dict (dict): The merged options, as loaded from defaults, yaml and env vars

    Returns:
        (dict): A copy of the dict with byte sizes and percentages normalized into numbers

    Raises:
        InvalidConfigException: If the options are not valid
    """
    if not isinstance(inputted_dict, dict):
        raise InvalidConfigException([], "Options need to be a dict")
    validator = OptionsValidator()
    if not validator.validate(inputted_dict, options_schema):
        error_dict = validator.errors
        (
            error_location,
            error_message,
        ) = _calculate_error_location_and_message_from_error_dict(error_dict)
        log.warning(
            "Bundle analysis options are invalid",
            extra=dict(errors=error_dict),
        )
        raise InvalidConfigException(
            error_location=error_location,
            error_dict=error_dict,
            error_message=error_message,
        )
    return validator.document


__all__ = ["InvalidConfigException", "validate_options"]
