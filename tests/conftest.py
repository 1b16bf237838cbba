import os

import orjson
import pytest

from nextbundle.bundle_analysis import (
    BundleAnalysisReportLoader,
    Options,
    StoragePaths,
)
from nextbundle.config import ConfigHelper


@pytest.fixture
def clean_environment(mocker):
    mocker.patch.dict(os.environ, {}, clear=True)


@pytest.fixture
def mock_configuration(mocker, tmp_path, clean_environment):
    m = mocker.patch("nextbundle.config._get_config_instance")
    mock_config = ConfigHelper(yaml_path=str(tmp_path / "missing.yml"))
    m.return_value = mock_config
    return mock_config


@pytest.fixture
def loader(tmp_path):
    return BundleAnalysisReportLoader(".next", cwd=str(tmp_path))


@pytest.fixture
def save_reports(loader):
    """
    Saves the given head and base report dicts where the loader expects them
    """

    def save_reports(head, base):
        for storage_path, report in (
            (StoragePaths.head_report, head),
            (StoragePaths.base_report, base),
        ):
            if report is None:
                continue
            path = storage_path.path(loader.root)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(orjson.dumps(report, option=orjson.OPT_INDENT_2))
        return loader

    return save_reports


@pytest.fixture
def options():
    return Options(name="docs")
