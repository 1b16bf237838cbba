from nextbundle.bundle_analysis.comment import render_comment
from nextbundle.bundle_analysis.comparison import (
    BundleAnalysisComparison,
    MissingBaseReportError,
    MissingHeadReportError,
)
from nextbundle.bundle_analysis.models import (
    BundleReport,
    BundleStats,
    GlobalChange,
    InvalidReportError,
    Options,
    PageChange,
)
from nextbundle.bundle_analysis.storage import BundleAnalysisReportLoader, StoragePaths

__all__ = [
    "BundleAnalysisComparison",
    "BundleAnalysisReportLoader",
    "BundleReport",
    "BundleStats",
    "GlobalChange",
    "InvalidReportError",
    "MissingBaseReportError",
    "MissingHeadReportError",
    "Options",
    "PageChange",
    "StoragePaths",
    "render_comment",
]
