"""Command-line entrypoint.

Responsibilities (and nothing more):
- Parse arguments and load Settings
- Configure structlog
- Wire the HTTP client, fetcher, validator and trigger for one run
- Map SpecRefError to a non-zero exit code
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog

from specref import __version__
from specref.config import Settings
from specref.errors import SpecRefError
from specref.fetcher import Fetcher, build_http_client
from specref.logging_setup import configure_logging
from specref.models.outcome import ValidationReport
from specref.page import load_page, write_page
from specref.prepare_tref import prepare_tref
from specref.reference_index import extract_embedded_index, read_xtrefs_file
from specref.trigger import ValidationTrigger
from specref.validator import ExternalRefValidator

log = structlog.get_logger()


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="specref",
        description="Validate external term references (xrefs/trefs) in rendered specs.",
    )
    parser.add_argument("--version", action="version", version=f"specref {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser(
        "validate",
        help="Check a rendered page's external references against the live specs",
    )
    validate.add_argument("page", type=Path, help="Rendered spec page (e.g. docs/index.html)")
    validate.add_argument(
        "--xtrefs",
        type=Path,
        default=None,
        help="Read the reference index from this file instead of the page's allXTrefs",
    )
    validate.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the annotated page here (default: overwrite PAGE)",
    )
    validate.add_argument(
        "--show-valid",
        action="store_true",
        help="Also mark references whose definition is unchanged",
    )
    validate.add_argument("--json", action="store_true", help="Print the report as JSON")

    prepare = subparsers.add_parser(
        "prepare-tref",
        help="Transclude cached external definitions into tref term files",
    )
    prepare.add_argument(
        "directory",
        type=Path,
        nargs="?",
        default=Path("spec"),
        help="Directory of markdown term files (default: spec)",
    )
    prepare.add_argument(
        "--xtrefs",
        type=Path,
        default=None,
        help="Reference index file (default: <build.output_dir>/xtrefs-data.json)",
    )

    return parser


async def run_validate(
    page: Path,
    settings: Settings,
    *,
    xtrefs: Path | None = None,
    output: Path | None = None,
) -> ValidationReport:
    """Validate one rendered page and write the annotated result."""
    document = load_page(page)
    index = read_xtrefs_file(xtrefs) if xtrefs is not None else extract_embedded_index(document)

    async with build_http_client(settings.fetcher) as client:
        validator = ExternalRefValidator(Fetcher(client), settings.validator)
        trigger = ValidationTrigger(
            lambda: validator.validate(document, index),
            settings.trigger,
        )
        # The build has already written transcluded content into the page.
        trigger.signal_trefs_inserted()
        report = await trigger.run()

    write_page(document, output or page)
    return report or ValidationReport()


def _print_report(report: ValidationReport, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(report.model_dump(mode="json"), indent=2))
        return

    print(
        f"{report.specs_validated} spec(s), {report.xrefs_validated} xref(s), "
        f"{report.trefs_validated} tref(s) checked: "
        f"{report.count('missing')} missing, {report.count('changed')} changed, "
        f"{report.count('error')} unverifiable"
    )
    for result in report.results:
        if result.outcome.kind == "valid":
            continue
        print(
            f"  {result.outcome.kind:<8} {result.reference_type} "
            f"{result.external_spec}:{result.term}"
        )


def main(argv: list[str] | None = None) -> int:
    args = create_parser().parse_args(argv)
    settings = Settings()
    configure_logging(settings)

    try:
        if args.command == "validate":
            if args.show_valid:
                settings.validator = settings.validator.model_copy(
                    update={"show_valid_indicators": True}
                )
            report = asyncio.run(
                run_validate(args.page, settings, xtrefs=args.xtrefs, output=args.output)
            )
            _print_report(report, as_json=args.json)
        else:
            rewritten = prepare_tref(args.directory, args.xtrefs or settings.build.xtrefs_path)
            print(f"{len(rewritten)} tref file(s) updated")
    except SpecRefError as exc:
        log.error("command_failed", command=args.command, code=exc.code, message=exc.message)
        if getattr(args, "json", False):
            print(json.dumps(exc.to_dict(), indent=2))
        else:
            print(f"error: {exc.message}\n{exc.suggestion}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
