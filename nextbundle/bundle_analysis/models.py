from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional

GLOBAL_BUNDLE_KEY = "__global"


class InvalidReportError(Exception):
    pass


@dataclass(frozen=True)
class Options:
    """
    Options for a single comparison run. Built once from configuration and
    passed down explicitly, never mutated.
    """

    name: str = "app"
    budget: Optional[int] = None
    budget_percent_increase_red: float = 20.0
    minimum_change_threshold: Optional[int] = None
    show_details: bool = True
    build_output_directory: str = ".next"
    skip_comment_if_empty: bool = False
    show_removed_pages: bool = False
    sentry_dsn: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Options":
        known = {field.name for field in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass(frozen=True)
class BundleStats:
    raw: int
    gzip: int

    @classmethod
    def from_dict(cls, page: str, data: Any) -> "BundleStats":
        if not isinstance(data, dict):
            raise InvalidReportError(f"Stats for {page} should be an object")
        values = {}
        for key in ("raw", "gzip"):
            value = data.get(key)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidReportError(f"Stats for {page} are missing an integer {key}")
            if value < 0:
                raise InvalidReportError(f"Stats for {page} have a negative {key}")
            values[key] = value
        return cls(**values)


class BundleReport:
    """
    Sizes of every page bundle of a build, keyed by page path.
    The shared bundle that loads on every page is kept apart in `global_stats`.
    """

    def __init__(self, pages: Dict[str, BundleStats], global_stats: BundleStats):
        self._pages = dict(pages)
        self.global_stats = global_stats

    @classmethod
    def from_dict(cls, data: Any) -> "BundleReport":
        if not isinstance(data, dict):
            raise InvalidReportError("Bundle report should be an object")
        if GLOBAL_BUNDLE_KEY not in data:
            raise InvalidReportError(f"Bundle report has no {GLOBAL_BUNDLE_KEY} entry")
        pages = {
            page: BundleStats.from_dict(page, stats)
            for page, stats in data.items()
            if page != GLOBAL_BUNDLE_KEY
        }
        global_stats = BundleStats.from_dict(GLOBAL_BUNDLE_KEY, data[GLOBAL_BUNDLE_KEY])
        return cls(pages, global_stats)

    def page(self, name: str) -> Optional[BundleStats]:
        return self._pages.get(name)

    def pages(self) -> Iterator[tuple[str, BundleStats]]:
        return iter(self._pages.items())

    def __contains__(self, name: str) -> bool:
        return name in self._pages

    def __len__(self) -> int:
        return len(self._pages)


@dataclass(frozen=True)
class BaseChange:
    """
    Base class for representing a size change between the base and head reports.
    """

    class ChangeType(Enum):
        ADDED = "added"
        REMOVED = "removed"
        CHANGED = "changed"

    change_type: ChangeType
    raw: int
    gzip: int
    # None for added pages, there is nothing to compare them against
    gzip_diff: Optional[int]

    @property
    def increase(self) -> bool:
        return bool(self.gzip_diff) and self.gzip_diff > 0


@dataclass(frozen=True)
class PageChange(BaseChange):
    """
    Info about how a single page bundle changed. For removed pages `raw` and
    `gzip` are the sizes it had on the base branch.
    """

    page: str
    raw_diff: Optional[int] = None


@dataclass(frozen=True)
class GlobalChange(BaseChange):
    """
    Info about how the global bundle changed.
    """

    page: str = "global"
