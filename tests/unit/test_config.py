import os

import pytest

from nextbundle.bundle_analysis import Options
from nextbundle.config import ConfigHelper, get_options, normalize_keys
from nextbundle.validation import InvalidConfigException


class TestConfig(object):
    def test_get_options_nothing_user_set(self, mock_configuration):
        assert get_options() == Options(
            name="app",
            budget=None,
            budget_percent_increase_red=20.0,
            minimum_change_threshold=None,
            show_details=True,
            build_output_directory=".next",
            skip_comment_if_empty=False,
            show_removed_pages=False,
        )

    def test_get_options_from_yaml(self, tmp_path, clean_environment):
        yaml_path = tmp_path / "nextbundle.yml"
        yaml_path.write_text(
            "\n".join(
                [
                    "name: docs",
                    "budget: 350kb",
                    "budget_percent_increase_red: 10%",
                    "minimum_change_threshold: 100",
                    "show_details: false",
                    "build_output_directory: build",
                    "skip_comment_if_empty: yes",
                ]
            )
        )
        assert get_options(config_path=str(yaml_path)) == Options(
            name="docs",
            budget=350000,
            budget_percent_increase_red=10.0,
            minimum_change_threshold=100,
            show_details=False,
            build_output_directory="build",
            skip_comment_if_empty=True,
        )

    def test_get_options_camel_case_keys(self, tmp_path, clean_environment):
        yaml_path = tmp_path / "nextbundle.yml"
        yaml_path.write_text(
            "\n".join(
                [
                    "name: docs",
                    "budget: 358400",
                    "budgetPercentIncreaseRed: 20",
                    "minimumChangeThreshold: 0",
                    "showDetails: true",
                    "buildOutputDirectory: .next",
                ]
            )
        )
        options = get_options(config_path=str(yaml_path))
        assert options.budget == 358400
        assert options.budget_percent_increase_red == 20.0
        assert options.minimum_change_threshold == 0

    def test_env_vars_override_yaml(self, tmp_path, mocker):
        yaml_path = tmp_path / "nextbundle.yml"
        yaml_path.write_text("budget: 350kb\nshow_details: true\n")
        mocker.patch.dict(
            os.environ,
            {
                "NEXTBUNDLE__BUDGET": "1mb",
                "NEXTBUNDLE__SHOW_DETAILS": "false",
                "NEXTBUNDLE__MINIMUM_CHANGE_THRESHOLD": "50",
                "OTHER__VARIABLE": "ignored",
            },
            clear=True,
        )
        options = get_options(config_path=str(yaml_path))
        assert options.budget == 1000000
        assert options.show_details is False
        assert options.minimum_change_threshold == 50

    def test_overrides_win_over_env_vars(self, tmp_path, mocker):
        mocker.patch.dict(os.environ, {"NEXTBUNDLE__NAME": "env-name"}, clear=True)
        options = get_options(
            config_path=str(tmp_path / "missing.yml"),
            name="cli-name",
            build_output_directory=None,
        )
        assert options.name == "cli-name"
        assert options.build_output_directory == ".next"

    def test_yaml_path_from_env_var(self, tmp_path, mocker):
        yaml_path = tmp_path / "custom.yml"
        yaml_path.write_text("name: from-env-file\n")
        mocker.patch.dict(os.environ, {"NEXTBUNDLE_YML": str(yaml_path)}, clear=True)
        assert ConfigHelper().options().name == "from-env-file"

    def test_empty_yaml_file(self, tmp_path, clean_environment):
        yaml_path = tmp_path / "nextbundle.yml"
        yaml_path.write_text("")
        assert get_options(config_path=str(yaml_path)) == Options()

    def test_invalid_budget(self, tmp_path, clean_environment):
        yaml_path = tmp_path / "nextbundle.yml"
        yaml_path.write_text("budget: a lot\n")
        with pytest.raises(InvalidConfigException) as exc:
            get_options(config_path=str(yaml_path))
        assert exc.value.error_location == ["budget"]

    def test_unknown_option(self, tmp_path, clean_environment):
        yaml_path = tmp_path / "nextbundle.yml"
        yaml_path.write_text("colour: blue\n")
        with pytest.raises(InvalidConfigException) as exc:
            get_options(config_path=str(yaml_path))
        assert exc.value.error_location == ["colour"]
        assert exc.value.error_message == "unknown field"

    def test_yaml_not_a_mapping(self, tmp_path, clean_environment):
        yaml_path = tmp_path / "nextbundle.yml"
        yaml_path.write_text("- budget\n- name\n")
        with pytest.raises(InvalidConfigException):
            get_options(config_path=str(yaml_path))

    def test_invalid_yaml(self, tmp_path, clean_environment):
        yaml_path = tmp_path / "nextbundle.yml"
        yaml_path.write_text("budget: [350kb\n")
        with pytest.raises(InvalidConfigException) as exc:
            get_options(config_path=str(yaml_path))
        assert exc.value.original_exc is not None

    def test_params_are_cached(self, mocker, tmp_path, clean_environment):
        config = ConfigHelper(yaml_path=str(tmp_path / "missing.yml"))
        mock_yaml_content = mocker.patch.object(
            ConfigHelper, "yaml_content", return_value={"name": "cached"}
        )
        assert config.params["name"] == "cached"
        assert config.params["name"] == "cached"
        assert mock_yaml_content.call_count == 1

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("true", True),
            ("OFF", False),
            ("42", 42),
            ("-3", -3),
            ("12.5", 12.5),
            ("350kb", "350kb"),
        ],
    )
    def test_env_var_value_cast(self, value, expected):
        assert ConfigHelper()._env_var_value_cast(value) == expected


def test_normalize_keys():
    assert normalize_keys(
        {"budgetPercentIncreaseRed": 20, "show_details": True, "name": "docs"}
    ) == {"budget_percent_increase_red": 20, "show_details": True, "name": "docs"}
