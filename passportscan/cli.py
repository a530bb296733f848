"""
Command-line interface for PassportScan.

Usage:
    # Extract one passport with the default (balanced) preset
    passportscan extract uploads/passports/abc.jpg

    # Several files, every variant and configuration, on a thread pool
    passportscan extract scans/*.png --preset thorough --parallel

    # Show the pipeline configuration and whether Tesseract is installed
    passportscan info --preset fast

Each extracted file is printed as one JSON object: the extraction result
plus "validation" and "status".
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from passportscan.config import PRESET_NAMES
from passportscan.extractors.validators import assess_document
from passportscan.ocr.engine import detect_tesseract
from passportscan.pipeline import ExtractionPipeline, create_pipeline


def _report(pipeline: ExtractionPipeline, path: Path) -> tuple[dict, bool]:
    result, validation = pipeline.extract_and_validate(path)
    report = {"file": str(path), **result.to_dict()}
    report["validation"] = validation.to_dict() if validation else None
    report["status"] = assess_document(result.data).to_dict() if result.data else None
    return report, result.success


def cmd_extract(args: argparse.Namespace) -> int:
    overrides = {"language": args.lang, "parallel": args.parallel}
    if args.scratch_dir:
        overrides["scratch_dir"] = args.scratch_dir

    pipeline = create_pipeline(
        args.preset,
        reference_path=args.reference,
        **overrides,
    )

    failures = 0
    for path in args.files:
        report, ok = _report(pipeline, path)
        if not ok:
            failures += 1
        print(json.dumps(report, indent=2 if args.pretty else None))

    return 1 if failures else 0


def cmd_info(args: argparse.Namespace) -> int:
    pipeline = create_pipeline(args.preset)
    info = pipeline.get_info()
    info["tesseract_available"] = detect_tesseract()
    print(json.dumps(info, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="passportscan",
        description="Extract passport/ID fields from document images",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Extract fields from images")
    extract.add_argument("files", nargs="+", type=Path, help="Image or PDF files")
    extract.add_argument("--preset", choices=PRESET_NAMES, default="balanced")
    extract.add_argument("--lang", default="eng", help="Recognition language")
    extract.add_argument("--parallel", action="store_true", help="Run engine calls in threads")
    extract.add_argument("--scratch-dir", type=Path, help="Directory for temporary variants")
    extract.add_argument("--reference", type=Path, help="Alternative reference data YAML")
    extract.add_argument("--pretty", action="store_true", help="Indent JSON output")
    extract.set_defaults(func=cmd_extract)

    info = subparsers.add_parser("info", help="Show pipeline configuration")
    info.add_argument("--preset", choices=PRESET_NAMES, default="balanced")
    info.set_defaults(func=cmd_info)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
