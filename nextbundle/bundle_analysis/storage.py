import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional

import orjson

from nextbundle.bundle_analysis.models import BundleReport, InvalidReportError

log = logging.getLogger(__name__)


class StoragePaths(Enum):
    head_report = "analyze/__bundle_analysis.json"
    base_report = "analyze/base/bundle/__bundle_analysis.json"
    comment = "analyze/__bundle_analysis_comment.txt"

    def path(self, root: Path) -> Path:
        return root / self.value


class BundleAnalysisReportLoader:
    """
    Loads `BundleReport`s from the build output directory of a
    Next.js project, and writes the rendered comment next to them.
    """

    def __init__(self, build_output_directory: str, cwd: Optional[str] = None):
        self.root = Path(cwd or os.getcwd()) / build_output_directory

    def load(self, storage_path: StoragePaths) -> Optional[BundleReport]:
        """
        Loads the `BundleReport` stored at the given path or returns `None`
        if no such report exists.

        Raises:
            InvalidReportError: If the file is not a valid bundle report
        """
        path = storage_path.path(self.root)
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            log.warning(
                "Bundle report not found at %s",
                path,
                extra=dict(report=storage_path.name, path=str(path)),
            )
            return None
        try:
            data = orjson.loads(content)
        except orjson.JSONDecodeError as exc:
            raise InvalidReportError(f"{path} is not valid JSON: {exc}") from exc
        report = BundleReport.from_dict(data)
        log.debug(
            "Loaded bundle report",
            extra=dict(report=storage_path.name, path=str(path), pages=len(report)),
        )
        return report

    def write_comment(self, comment: str) -> Path:
        path = StoragePaths.comment.path(self.root)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(comment.strip(), encoding="utf-8")
        return path
