"""
Renders a bundle analysis comparison as the markdown body of a pull request
comment.

The render helpers receive the comparison data and the run options and return
a fragment of text. `render_comment` glues the fragments together in their
fixed order:

    header, global bundle, new pages, changed pages, removed pages,
    "no changes" message, marker
"""

import logging
import math
from typing import List, Optional, Sequence

import sentry_sdk

from nextbundle.bundle_analysis.comparison import BundleAnalysisComparison
from nextbundle.bundle_analysis.models import (
    BaseChange,
    BundleStats,
    GlobalChange,
    Options,
    PageChange,
)
from nextbundle.bundle_analysis.utils import filesize, number_to_words, title_case

log = logging.getLogger(__name__)

ACTION_URL = "https://github.com/hashicorp/nextjs-bundle-analysis"

NO_CHANGES_MESSAGE = "This PR introduced no changes to the JavaScript bundle! 🙌"

# changes smaller than this are rounded away when displayed with 2 decimals
NEGLIGIBLE_PERCENTAGE = 0.01

GLOBAL_BUNDLE_DETAILS = """<details>
<summary>Details</summary>
<p>The <strong>global bundle</strong> is the javascript bundle that loads alongside every page. It is in its own category because its impact is much higher - an increase to its size means that every page on your website loads slower, and a decrease means every page loads faster.</p>
<p>Any third party scripts you have added directly to your app using the <code>&lt;script&gt;</code> tag are not accounted for in this analysis</p>
<p>If you want further insight into what is behind the changes, give <a href='https://www.npmjs.com/package/@next/bundle-analyzer'>@next/bundle-analyzer</a> a try!</p>
</details>"""

CHANGED_PAGES_DETAILS = """<details>
<summary>Details</summary>
<p>Only the gzipped size is provided here based on <a href='https://twitter.com/slightlylate/status/1412851269211811845'>an expert tip</a>.</p>
<p><strong>First Load</strong> is the size of the global bundle plus the bundle for the individual page. If a user were to show up to your website and land on a given page, the first load size represents the amount of javascript that user would need to download. If <code>next/link</code> is used, subsequent page loads would only need to download that page's bundle (the number in the "Size" column), since the global bundle has already been downloaded.</p>
<p>Any third party scripts you have added directly to your app using the <code>&lt;script&gt;</code> tag are not accounted for in this analysis</p>
{budget_details}
</details>"""

BUDGET_DETAILS = """<p>The "Budget %" column shows what percentage of your performance budget the <strong>First Load</strong> total takes up. For example, if your budget was 100kb, and a given page's first load size was 10kb, it would be 10% of your budget. You can also see how much this has increased or decreased compared to the base branch of your PR. If this percentage has increased by {red_threshold}% or more, there will be a red status indicator applied, indicating that special attention should be given to this. If you see "+/- <0.01%" it means that there was a change in bundle size, but it is a trivial enough amount that it can be ignored.</p>"""

SIZE_DETAILS = """<p>Next to the size is how much the size has increased or decreased compared with the base branch of this PR. If this percentage has increased by {red_threshold}% or more, there will be a red status indicator applied, indicating that special attention should be given to this.</p>"""


def _plural(items: Sequence) -> str:
    return "s" if len(items) > 1 else ""


def _format_percentage_threshold(value: float) -> str:
    return f"{value:g}"


def render_status_indicator(percentage_change: float, red_threshold: float) -> str:
    """
    Given a percentage that a metric has changed, renders a colored status indicator:
    - yellow means "keep an eye on this"
    - red means "this is a problem"
    - green means "this is a win"
    Negligible changes get no indicator at all.
    """
    if 0 < percentage_change < red_threshold:
        return "🟡 +"
    if percentage_change >= red_threshold:
        return "🔴 +"
    if -NEGLIGIBLE_PERCENTAGE < percentage_change < NEGLIGIBLE_PERCENTAGE:
        return ""
    return "🟢 "


def render_header(options: Options) -> str:
    return (
        f"## 📦 Next.js Bundle Analysis for {options.name}\n\n"
        f"This analysis was generated by the [Next.js Bundle Analysis action]({ACTION_URL}). 🤖\n\n"
    )


def render_marker(options: Options) -> str:
    # the calling automation looks this tag up to edit its previous comment
    return f"<!-- __NEXTJS_BUNDLE_{options.name} -->"


def _size_percentage_change(gzip_diff: int, gzip: int) -> float:
    if gzip == 0:
        return math.copysign(math.inf, gzip_diff)
    return gzip_diff / gzip * 100


def render_size(change: BaseChange, show_budget_diff: bool, red_threshold: float) -> str:
    """
    Renders the compressed size of a row. Rows with a size difference also get
    that difference, unless the budget column already shows it.
    """
    text = f" | `{filesize(change.gzip)}`"
    if change.gzip_diff and not show_budget_diff:
        indicator = render_status_indicator(
            _size_percentage_change(change.gzip_diff, change.gzip), red_threshold
        )
        text += f" _({indicator}{filesize(change.gzip_diff)})_"
    return text


def render_first_load(global_bundle: Optional[BundleStats], first_load_size: int) -> str:
    if global_bundle is None:
        return ""
    return f" | {filesize(first_load_size)}"


def render_budget_change(budget_change: float, red_threshold: float) -> str:
    if -NEGLIGIBLE_PERCENTAGE < budget_change < NEGLIGIBLE_PERCENTAGE:
        change_text = "+/- <0.01%"
    else:
        change_text = f"{budget_change:.2f}%"
    return f" _({render_status_indicator(budget_change, red_threshold)}{change_text})_"


def render_budget_percentage(
    show_budget: bool,
    budget_percentage: float,
    budget_change: Optional[float],
    red_threshold: float,
) -> str:
    if not show_budget:
        return ""
    text = f" | {budget_percentage:.2f}%"
    if budget_change is not None:
        text += render_budget_change(budget_change, red_threshold)
    return text


def render_row(
    change: BaseChange,
    options: Options,
    global_current: Optional[BundleStats] = None,
    global_base: Optional[BundleStats] = None,
) -> str:
    show_budget = global_current is not None and bool(options.budget)
    show_budget_diff = bool(options.budget) and global_base is not None
    first_load_size = (
        change.gzip + global_current.gzip if global_current is not None else 0
    )

    budget_percentage = 0.0
    budget_change = None
    if show_budget:
        budget_percentage = round(first_load_size / options.budget * 100, 2)
        if global_base is not None and change.gzip_diff:
            previous_first_load_size = first_load_size - change.gzip_diff
            previous_budget_percentage = round(
                previous_first_load_size / options.budget * 100, 2
            )
            budget_change = round(budget_percentage - previous_budget_percentage, 2)

    red_threshold = options.budget_percent_increase_red
    return (
        f"| `{change.page}`"
        + render_size(change, show_budget_diff, red_threshold)
        + render_first_load(global_current, first_load_size)
        + render_budget_percentage(
            show_budget, budget_percentage, budget_change, red_threshold
        )
        + " |\n"
    )


def markdown_table(
    changes: Sequence[BaseChange],
    options: Options,
    global_current: Optional[BundleStats] = None,
    global_base: Optional[BundleStats] = None,
) -> str:
    """
    Renders a markdown table with a row per change. The "First Load" column is
    only rendered when the current global bundle is given, the budget column
    additionally requires a configured budget. Passing the base global bundle
    makes rows show their budget change instead of their raw size change.
    """
    show_budget = global_current is not None and bool(options.budget)
    header = "Page | Size (compressed) | "
    separator = "|---|---|"
    if global_current is not None:
        header += "First Load |"
        separator += "---|"
    if show_budget:
        header += f" % of Budget (`{filesize(options.budget)}`) |"
        separator += "---|"
    rows = "".join(
        render_row(change, options, global_current, global_base) for change in changes
    )
    return f"{header}\n{separator}\n{rows}"


def render_global_section(global_change: GlobalChange, options: Options) -> str:
    if global_change.increase:
        headline = "### ⚠️  Global Bundle Size Increased\n\n"
    else:
        headline = "### 🎉  Global Bundle Size Decreased\n\n"
    text = headline + markdown_table([global_change], options)
    if options.show_details:
        text += f"\n{GLOBAL_BUNDLE_DETAILS}\n\n"
    return text


def render_new_pages_section(
    new_pages: List[PageChange], global_current: BundleStats, options: Options
) -> str:
    plural = _plural(new_pages)
    verb = "were" if plural else "was"
    return (
        f"### New Page{plural} Added\n\n"
        f"The following page{plural} {verb} added to the bundle from the code in this PR:\n\n"
        + markdown_table(new_pages, options, global_current)
        + "\n"
    )


def render_changed_pages_section(
    changed_pages: List[PageChange],
    global_current: BundleStats,
    global_base: BundleStats,
    options: Options,
) -> str:
    plural = _plural(changed_pages)
    count = title_case(number_to_words(len(changed_pages)))
    text = (
        f"### {count} Page{plural} Changed Size\n\n"
        f"The following page{plural} changed size from the code in this PR compared to its base branch:\n\n"
        + markdown_table(changed_pages, options, global_current, global_base)
    )
    if options.show_details:
        red_threshold = _format_percentage_threshold(options.budget_percent_increase_red)
        if options.budget:
            budget_details = BUDGET_DETAILS.format(red_threshold=red_threshold)
        else:
            budget_details = SIZE_DETAILS.format(red_threshold=red_threshold)
        text += "\n" + CHANGED_PAGES_DETAILS.format(budget_details=budget_details) + "\n"
    return text


def render_removed_pages_section(removed_pages: List[PageChange], options: Options) -> str:
    plural = _plural(removed_pages)
    verb = "were" if plural else "was"
    return (
        f"### Page{plural} Removed\n\n"
        f"The following page{plural} {verb} removed from the bundle by the code in this PR:\n\n"
        + markdown_table(removed_pages, options)
        + "\n"
    )


@sentry_sdk.trace
def render_comment(comparison: BundleAnalysisComparison, options: Options) -> str:
    """
    Renders the whole comment for a comparison. Returns an empty string when
    nothing changed and `skip_comment_if_empty` is set.

    Raises:
        MissingHeadReportError, MissingBaseReportError: If a report doesn't exist
        InvalidReportError: If a report can't be parsed
    """
    global_current = comparison.head_report.global_stats
    global_base = comparison.base_report.global_stats

    global_change = comparison.global_change()
    new_pages = comparison.new_pages()
    changed_pages = comparison.changed_pages()
    removed_pages = comparison.removed_pages() if options.show_removed_pages else []

    sections = [render_header(options)]
    if global_change is not None:
        sections.append(render_global_section(global_change, options))
    if new_pages:
        sections.append(render_new_pages_section(new_pages, global_current, options))
    if changed_pages:
        sections.append(
            render_changed_pages_section(
                changed_pages, global_current, global_base, options
            )
        )
    if removed_pages:
        sections.append(render_removed_pages_section(removed_pages, options))

    has_no_changes = (
        global_change is None and not new_pages and not changed_pages and not removed_pages
    )
    if has_no_changes:
        sections.append(NO_CHANGES_MESSAGE)
    sections.append(render_marker(options))

    log.info(
        "Rendered bundle analysis comment",
        extra=dict(
            global_changed=global_change is not None,
            new_pages=len(new_pages),
            changed_pages=len(changed_pages),
            removed_pages=len(removed_pages),
        ),
    )
    if has_no_changes and options.skip_comment_if_empty:
        return ""
    return "".join(sections)
