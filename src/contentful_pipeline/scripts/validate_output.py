"""Output Validation Script

Validates that a documents JSON file written by the pipeline is usable by
later stages:
  - Each document has a string 'content' and an object 'metadata'
  - Metadata carries every Contentful system key
  - Entry id and locale are non-empty strings
  - Included asset/entry references are lists of ids

Usage:
    python -m contentful_pipeline.scripts.validate_output \\
        --path output/documents.json \\
        --locale en-US

Exits with code 0 on success, 1 on validation failure, 2 on argument error.
"""

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from contentful_pipeline import keys
from contentful_pipeline.transformers import NO_CONTENT


def load_documents(path: Path) -> List[Dict[str, Any]]:
    """Load documents from a JSON file.

    Supports:
      - a JSON array of objects
      - newline-delimited JSON (JSONL)
    """
    with path.open("r", encoding="utf-8") as f:
        content = f.read().strip()

    try:
        data = json.loads(content)
        if isinstance(data, list):
            return data
        raise ValueError("Top-level JSON is not a list of documents.")
    except json.JSONDecodeError:
        pass  # fall through to JSONL

    documents: List[Dict[str, Any]] = []
    for line_no, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Failed to parse JSON on line {line_no}: {e}"
            ) from e
        if not isinstance(obj, dict):
            raise ValueError(
                f"Line {line_no} JSON is not an object (got {type(obj)})"
            )
        documents.append(obj)

    if not documents:
        raise ValueError("No documents found in file.")

    return documents


def validate_document(
    document: Dict[str, Any],
    idx: int,
    expected_locale: Optional[str] = None,
) -> Tuple[List[str], List[str]]:
    """Validate a single serialized document.

    Returns:
        (errors, warnings)
    """
    errors: List[str] = []
    warnings: List[str] = []

    # --- content ---
    content = document.get("content")
    if content is None:
        errors.append(f"[idx={idx}] missing 'content'")
    elif not isinstance(content, str):
        errors.append(
            f"[idx={idx}] 'content' should be a string, got {type(content).__name__}"
        )
    elif content == NO_CONTENT:
        warnings.append(f"[idx={idx}] content field missing on source entry")

    # --- metadata ---
    metadata = document.get("metadata")
    if metadata is None:
        errors.append(f"[idx={idx}] missing 'metadata'")
        return errors, warnings
    if not isinstance(metadata, dict):
        errors.append(
            f"[idx={idx}] 'metadata' should be an object, got {type(metadata).__name__}"
        )
        return errors, warnings

    for key in keys.SYSTEM_KEYS:
        if key not in metadata:
            errors.append(f"[idx={idx}] metadata missing system key '{key}'")

    for key in (keys.ENTRY_ID, keys.ENTRY_LOCALE):
        value = metadata.get(key)
        if key in metadata and (not isinstance(value, str) or not value):
            errors.append(f"[idx={idx}] metadata.{key} should be a non-empty string")

    for key in (keys.INCLUDED_ASSETS, keys.INCLUDED_ENTRIES):
        value = metadata.get(key)
        if key in metadata and not (
            isinstance(value, list) and all(isinstance(v, str) for v in value)
        ):
            errors.append(f"[idx={idx}] metadata.{key} should be a list of ids")

    locale = metadata.get(keys.ENTRY_LOCALE)
    if expected_locale is not None and locale is not None and locale != expected_locale:
        warnings.append(
            f"[idx={idx}] locale {locale!r} != expected {expected_locale!r}"
        )

    return errors, warnings


def main(argv: list[str] | None = None) -> None:
    """Validate a documents output file.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:]

    Raises:
        SystemExit: With code 0 on success, 1 on validation failure
    """
    parser = argparse.ArgumentParser(
        description="Validate Contentful documents JSON output."
    )
    parser.add_argument(
        "--path",
        type=str,
        required=True,
        help="Path to documents.json",
    )
    parser.add_argument(
        "--locale",
        type=str,
        default=None,
        help="Warn about documents in a different locale.",
    )
    args = parser.parse_args(argv)

    path = Path(args.path)

    try:
        documents = load_documents(path)
    except Exception as e:
        print(f"FAILED TO LOAD FILE: {e}")
        raise SystemExit(1)

    all_errors: List[str] = []
    all_warnings: List[str] = []
    seen: set[tuple[str, str]] = set()

    for idx, document in enumerate(documents):
        errors, warnings = validate_document(document, idx, args.locale)
        all_errors.extend(errors)
        all_warnings.extend(warnings)

        metadata = document.get("metadata")
        if isinstance(metadata, dict):
            pair = (str(metadata.get(keys.ENTRY_ID)), str(metadata.get(keys.ENTRY_LOCALE)))
            if pair in seen:
                all_errors.append(f"[idx={idx}] duplicate document for entry/locale {pair}")
            seen.add(pair)

    if all_errors:
        print("VALIDATION FAILED:\n")
        for err in all_errors:
            print(err)
        print(f"\nTotal errors: {len(all_errors)}")
        if all_warnings:
            print(f"Total warnings: {len(all_warnings)}")
        raise SystemExit(1)

    print("VALIDATION PASSED")
    print(f"Total documents: {len(documents)}")
    if all_warnings:
        print("\nWarnings (non-fatal):")
        for w in all_warnings:
            print(w)
        print(f"\nTotal warnings: {len(all_warnings)}")

    raise SystemExit(0)


if __name__ == "__main__":
    main()
