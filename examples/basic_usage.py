#!/usr/bin/env python3
"""
Basic PassportScan Usage Example

This example demonstrates the core workflow:
1. Extract a passport record with default settings
2. Choose a speed/accuracy preset
3. Validate the record and check expiry
4. Watch recognition progress
5. Process a folder of uploads
"""

import sys
from pathlib import Path

import passportscan
from passportscan.ocr import ProgressEvent
from passportscan.pipeline import create_pipeline


def main(upload_dir: Path) -> int:
    uploads = sorted(upload_dir.glob("*.jpg")) + sorted(upload_dir.glob("*.png"))
    if not uploads:
        print(f"No uploads found in {upload_dir}")
        return 1

    # ─────────────────────────────────────────────────────────────────────────
    # 1. Basic Extraction
    # ─────────────────────────────────────────────────────────────────────────

    result = passportscan.extract_document(uploads[0])

    if not result.success:
        print(f"Could not read {uploads[0]}: {result.error}")
        return 1

    print(f"Extracted: {result.data.full_name}")
    print(f"  Document number: {result.data.document_number}")
    print(f"  Nationality: {result.data.nationality}")
    print(f"  Winning attempt: {result.method} (confidence {result.confidence:.1f})")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Presets and Overrides
    # ─────────────────────────────────────────────────────────────────────────

    # "fast" runs 2 engine calls, "thorough" runs 21
    pipeline = create_pipeline("thorough", parallel=True, max_workers=8)
    print(f"\nThorough preset: {pipeline.get_info()['attempts_per_document']} attempts")

    # ─────────────────────────────────────────────────────────────────────────
    # 3. Validation and Document Status
    # ─────────────────────────────────────────────────────────────────────────

    result, validation = pipeline.extract_and_validate(uploads[0])
    if validation is not None:
        print(f"Valid: {validation.is_valid} ({validation.confidence}% complete)")
        for error in validation.errors:
            print(f"  - {error}")

        status = passportscan.assess_document(result.data)
        if status.is_expired:
            print("  Passport has expired")
        elif status.expires_soon:
            print("  Passport expires within 30 days")
        if status.age is not None:
            print(f"  Holder age: {status.age} ({status.age_category})")

    # ─────────────────────────────────────────────────────────────────────────
    # 4. Progress Hook
    # ─────────────────────────────────────────────────────────────────────────

    def show(event: ProgressEvent) -> None:
        if event.stage != "attempt_started":
            print(f"  {event.variant_kind.value}/{event.config_name}: {event.stage}")

    create_pipeline("fast", progress=show).extract(uploads[0])

    # ─────────────────────────────────────────────────────────────────────────
    # 5. Batch Processing
    # ─────────────────────────────────────────────────────────────────────────

    print("\nBatch:")
    for path, batch_result in passportscan.extract_batch(uploads):
        if batch_result.success:
            print(f"  {path.name}: {batch_result.data.document_number or '?'}")
        else:
            print(f"  {path.name}: FAILED ({batch_result.error})")

    return 0


if __name__ == "__main__":
    sys.exit(main(Path(sys.argv[1] if len(sys.argv) > 1 else "uploads/passports")))
