import logging
import os
import re
from typing import Any, Dict, Optional

from yaml import YAMLError
from yaml import safe_load as yaml_load

from nextbundle.bundle_analysis.models import Options
from nextbundle.utils.case import camel_to_snake_case
from nextbundle.validation import InvalidConfigException, validate_options

log = logging.getLogger(__name__)

ENV_VAR_PREFIX = "NEXTBUNDLE__"
DEFAULT_CONFIG_PATH = ".nextbundle.yml"

default_config = {
    "name": "app",
    "budget": None,
    "budget_percent_increase_red": 20,
    "minimum_change_threshold": None,
    "show_details": True,
    "build_output_directory": ".next",
    "skip_comment_if_empty": False,
    "show_removed_pages": False,
    "sentry_dsn": None,
}


def normalize_keys(content: Dict[str, Any]) -> Dict[str, Any]:
    """
    Accepts both snake_case keys and the camelCase ones used by the
    `nextBundleAnalysis` section of a package.json
    """
    return {camel_to_snake_case(key): value for key, value in content.items()}


class ConfigHelper(object):
    def __init__(self, yaml_path: Optional[str] = None, overrides=None):
        self._params = None
        self.yaml_path = yaml_path
        self.overrides = overrides or {}

    # Load config values from environment variables
    def load_env_var(self):
        val = {}
        for env_var in os.environ:
            if env_var.startswith(ENV_VAR_PREFIX) and len(env_var) > len(
                ENV_VAR_PREFIX
            ):
                key = env_var[len(ENV_VAR_PREFIX) :].lower()
                val[key] = self._env_var_value_cast(os.getenv(env_var))
        return val

    def _env_var_value_cast(self, data):
        if isinstance(data, str):
            if data in ("true", "True", "TRUE", "on", "On", "ON"):
                return True
            elif data in ("false", "False", "FALSE", "off", "Off", "OFF"):
                return False
            elif re.match(r"^-?\d+$", data):
                return int(data)
            elif re.match(r"^-?\d+\.\d+$", data):
                return float(data)

        return data

    @property
    def params(self):
        """
        Construct the options by combining default values, yaml config, env vars
        and explicit overrides, each one overriding the previous.
        """
        if self._params is None:
            unvalidated_result = {
                **default_config,
                **normalize_keys(self.yaml_content()),
                **self.load_env_var(),
                **{k: v for k, v in self.overrides.items() if v is not None},
            }
            self.set_params(validate_options(unvalidated_result))
        return self._params

    def set_params(self, val):
        self._params = val

    def load_yaml_file(self):
        yaml_path = self.yaml_path or os.getenv("NEXTBUNDLE_YML", DEFAULT_CONFIG_PATH)
        with open(yaml_path, "r") as c:
            return c.read()

    def yaml_content(self):
        try:
            content = yaml_load(self.load_yaml_file())
        except FileNotFoundError:
            if self.yaml_path:
                log.warning(
                    "Config file not found, using defaults",
                    extra=dict(file_location=self.yaml_path),
                )
            return {}
        except YAMLError as exc:
            raise InvalidConfigException(
                [], "Config file is not valid yaml", original_exc=exc
            ) from exc
        if content is None:
            return {}
        if not isinstance(content, dict):
            raise InvalidConfigException([], "Config file needs to be a mapping")
        return content

    def options(self) -> Options:
        return Options.from_dict(self.params)


config_class_instance = ConfigHelper()


def _get_config_instance():
    return config_class_instance


def get_options(config_path: Optional[str] = None, **overrides) -> Options:
    """
    Loads the options of a run. Without arguments the shared config instance is
    used, otherwise a new one is built for the given file and overrides.

    Raises:
        InvalidConfigException: If the resulting options are not valid
    """
    if config_path is None and not overrides:
        return _get_config_instance().options()
    return ConfigHelper(yaml_path=config_path, overrides=overrides).options()
