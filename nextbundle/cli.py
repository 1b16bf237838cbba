import argparse
import logging
from typing import List, Optional

import sentry_sdk

from nextbundle.bundle_analysis import (
    BundleAnalysisComparison,
    BundleAnalysisReportLoader,
    InvalidReportError,
    MissingBaseReportError,
    MissingHeadReportError,
    StoragePaths,
    render_comment,
)
from nextbundle.config import get_options
from nextbundle.validation import InvalidConfigException

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nextbundle-compare",
        description=(
            "Compare the Next.js bundle analysis of the current branch against "
            "its base branch and render a pull request comment."
        ),
    )
    parser.add_argument("--config", help="path to the yaml options file")
    parser.add_argument(
        "--cwd", help="project directory containing the build output (default: .)"
    )
    parser.add_argument(
        "--build-output-directory", help="build output directory, relative to --cwd"
    )
    parser.add_argument("--name", help="name of the app, shown in the comment")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def setup_sentry(dsn: Optional[str]) -> None:
    if not dsn:
        return
    sentry_sdk.init(dsn=dsn, traces_sample_rate=1.0)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    try:
        options = get_options(
            config_path=args.config,
            build_output_directory=args.build_output_directory,
            name=args.name,
        )
    except InvalidConfigException as exc:
        location = ".".join(str(part) for part in exc.error_location) or "<root>"
        log.error(
            "Invalid bundle analysis options at %s: %s",
            location,
            exc.error_message,
            extra=dict(
                error_location=exc.error_location, error_message=exc.error_message
            ),
        )
        return 2
    setup_sentry(options.sentry_dsn)

    loader = BundleAnalysisReportLoader(options.build_output_directory, cwd=args.cwd)
    comparison = BundleAnalysisComparison(
        loader, minimum_change_threshold=options.minimum_change_threshold
    )
    try:
        comment = render_comment(comparison, options)
    except MissingHeadReportError:
        log.error(
            "Bundle report of the current branch is missing: %s",
            StoragePaths.head_report.path(loader.root),
        )
        return 1
    except MissingBaseReportError:
        log.error(
            "Bundle report of the base branch is missing: %s",
            StoragePaths.base_report.path(loader.root),
        )
        return 1
    except InvalidReportError as exc:
        log.error("Unable to read bundle report: %s", exc)
        return 1

    # shows up in the CI console, the file below is what gets posted
    print(comment)
    path = loader.write_comment(comment)
    log.info("Wrote bundle analysis comment to %s", path)
    return 0
