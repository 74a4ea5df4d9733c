"""Pipeline CLI Entry Point

Provides the command-line interface for running the Contentful source.
Handles argument parsing, logging configuration, and writing the produced
documents to JSON.

Credentials default to the CONTENTFUL_* environment variables (see
``contentful_pipeline.client``); flags take precedence.

Usage:
    python -m run_pipeline --content-type blogPost --content-field body \\
        --locale '*' --recursive --output-dir output
"""

import argparse
import logging
import time
from pathlib import Path

from contentful_pipeline.client import ContentfulSettings
from contentful_pipeline.models import QueryConfig
from contentful_pipeline.pipeline import ContentfulSource, run_pipeline


def configure_logging() -> None:
    """Configure logging with both console and file output.

    Sets up:
      - Root logger at DEBUG level
      - Console handler at INFO level for user-facing messages
      - File handler at DEBUG level for detailed troubleshooting
      - Reduced verbosity for the HTTP and SDK loggers
    """
    log_dir = Path("logs")
    log_dir.mkdir(exist_ok=True)
    log_file = log_dir / "pipeline.log"

    # Root logger
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    for noisy in ("urllib3", "requests", "contentful"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    # Clear existing handlers to avoid duplicates if run multiple times
    logger.handlers.clear()
    logger.addHandler(console_handler)
    logger.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fetch Contentful entries and write them as documents"
    )
    parser.add_argument("--space-id", default=None, help="Contentful space id.")
    parser.add_argument("--access-token", default=None, help="Delivery or Preview API token.")
    parser.add_argument("--environment", default=None, help="Environment id (default: master).")
    parser.add_argument(
        "--preview",
        action="store_true",
        default=None,
        help="Read from the Preview API (drafts included).",
    )
    parser.add_argument("--content-type", default=None, help="Only fetch entries of this content type.")
    parser.add_argument(
        "--content-field",
        default="",
        help="Field used as document content (empty: no content).",
    )
    parser.add_argument(
        "--locale",
        default="",
        help="Locale code, '*' for all locales, empty for the default locale.",
    )
    parser.add_argument("--include", type=int, default=1, help="Link include depth (0-10).")
    parser.add_argument("--limit", type=int, default=100, help="Entries per page (1-1000).")
    parser.add_argument("--skip", type=int, default=0, help="Entries to skip before the first page.")
    parser.add_argument(
        "--recursive",
        action="store_true",
        help="Keep fetching pages until the last one.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("output"),
        help="Directory where output files will be written.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and map entries but don't write any files.",
    )
    parser.add_argument(
        "--no-history",
        action="store_true",
        help="Overwrite output files instead of creating timestamped versions",
    )
    return parser


def main(argv=None) -> int:
    """
    CLI entrypoint for the Contentful source pipeline.

    Parses command-line arguments, runs the pipeline end-to-end,
    and returns a Unix-style exit code (0 on success, non-zero on failure).
    """
    configure_logging()
    logger = logging.getLogger(__name__)

    args = build_parser().parse_args(argv)

    logger.info("=== Starting Contentful pipeline ===")
    logger.info("Content type: %s", args.content_type or "(all)")
    logger.info("Locale: %s", args.locale or "(default)")
    logger.info("Recursive: %s", args.recursive)
    logger.info("Output directory: %s", args.output_dir)
    if args.dry_run:
        logger.info("DRY RUN MODE: no files will be written")

    try:
        start_time = time.time()

        settings = ContentfulSettings.from_env(
            space_id=args.space_id,
            access_token=args.access_token,
            environment=args.environment,
            use_preview=args.preview,
        )
        config = QueryConfig(
            content_field=args.content_field,
            content_type=args.content_type,
            locale=args.locale,
            include=args.include,
            limit=args.limit,
            skip=args.skip,
            recursive=args.recursive,
        )
        source = ContentfulSource.from_settings(settings, config)

        entries, documents, output_paths = run_pipeline(
            source,
            output_dir=args.output_dir,
            dry_run=args.dry_run,
            keep_history=not args.no_history,
        )

        elapsed_time = time.time() - start_time

        logger.info("=" * 70)
        logger.info("Pipeline completed successfully in %.2fs", elapsed_time)
        logger.info("")
        logger.info("Summary:")
        logger.info("  Space:      %s", settings.space_id)
        logger.info("  Entries:    %d", entries)
        logger.info("  Documents:  %d", documents)
        logger.info("")
        logger.info("Output files:")
        for name, path in output_paths.items():
            logger.info("  %-12s %s", f"{name}:", path)
        logger.info("=" * 70)

    except Exception as e:
        logger.exception(f"Pipeline failed with an unhandled exception: {e}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
