import logging
from functools import cached_property
from typing import Iterator, List, Optional

import sentry_sdk

from nextbundle.bundle_analysis.models import (
    BundleReport,
    GlobalChange,
    PageChange,
)
from nextbundle.bundle_analysis.storage import (
    BundleAnalysisReportLoader,
    StoragePaths,
)

log = logging.getLogger(__name__)


class MissingBaseReportError(Exception):
    pass


class MissingHeadReportError(Exception):
    pass


def is_reportable_change(
    size_delta: int, minimum_change_threshold: Optional[int] = None
) -> bool:
    """
    A size change is only reported when it isn't zero and, if a minimum
    change threshold is configured, when it is bigger than that threshold.
    """
    if size_delta == 0:
        return False
    return minimum_change_threshold is None or abs(size_delta) > minimum_change_threshold


class BundleAnalysisComparison:
    """
    Compares the bundle report of the current branch (head) against the one
    of the base branch.
    """

    def __init__(
        self,
        loader: BundleAnalysisReportLoader,
        minimum_change_threshold: Optional[int] = None,
    ):
        self.loader = loader
        self.minimum_change_threshold = minimum_change_threshold

    @cached_property
    def base_report(self) -> BundleReport:
        base_report = self.loader.load(StoragePaths.base_report)
        if base_report is None:
            raise MissingBaseReportError()
        return base_report

    @cached_property
    def head_report(self) -> BundleReport:
        head_report = self.loader.load(StoragePaths.head_report)
        if head_report is None:
            raise MissingHeadReportError()
        return head_report

    @sentry_sdk.trace
    def global_change(self) -> Optional[GlobalChange]:
        """
        Returns how the global bundle changed, or `None` when there is no
        change worth reporting.
        """
        head_stats = self.head_report.global_stats
        base_stats = self.base_report.global_stats
        gzip_diff = head_stats.gzip - base_stats.gzip
        if not is_reportable_change(gzip_diff, self.minimum_change_threshold):
            return None
        return GlobalChange(
            change_type=GlobalChange.ChangeType.CHANGED,
            raw=head_stats.raw,
            gzip=head_stats.gzip,
            gzip_diff=gzip_diff,
        )

    @sentry_sdk.trace
    def page_changes(self) -> Iterator[PageChange]:
        """
        Yields the changes of every page, in the order they appear in the head
        report, followed by the pages that only exist in the base report.
        Pages whose gzip size didn't change, or changed less than the minimum
        change threshold, are skipped.
        """
        for page, head_stats in self.head_report.pages():
            base_stats = self.base_report.page(page)
            if base_stats is None:
                yield PageChange(
                    page=page,
                    change_type=PageChange.ChangeType.ADDED,
                    raw=head_stats.raw,
                    gzip=head_stats.gzip,
                    gzip_diff=None,
                )
                continue
            gzip_diff = head_stats.gzip - base_stats.gzip
            if not is_reportable_change(gzip_diff, self.minimum_change_threshold):
                continue
            yield PageChange(
                page=page,
                change_type=PageChange.ChangeType.CHANGED,
                raw=head_stats.raw,
                gzip=head_stats.gzip,
                gzip_diff=gzip_diff,
                raw_diff=head_stats.raw - base_stats.raw,
            )

        for page, base_stats in self.base_report.pages():
            if page not in self.head_report:
                yield PageChange(
                    page=page,
                    change_type=PageChange.ChangeType.REMOVED,
                    raw=base_stats.raw,
                    gzip=base_stats.gzip,
                    gzip_diff=-base_stats.gzip,
                    raw_diff=-base_stats.raw,
                )

    def _page_changes_of_type(self, change_type: PageChange.ChangeType) -> List[PageChange]:
        return [
            change for change in self.page_changes() if change.change_type == change_type
        ]

    def new_pages(self) -> List[PageChange]:
        return self._page_changes_of_type(PageChange.ChangeType.ADDED)

    def changed_pages(self) -> List[PageChange]:
        return self._page_changes_of_type(PageChange.ChangeType.CHANGED)

    def removed_pages(self) -> List[PageChange]:
        return self._page_changes_of_type(PageChange.ChangeType.REMOVED)
