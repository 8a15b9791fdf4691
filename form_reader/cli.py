"""Command-line interface for extracting form records from OCR text.

Provides subcommands for a single transcript, batch processing of a
folder of transcripts into CSV, and listing the extractable fields.
"""

import argparse
import csv
import json
import sys
import time
from pathlib import Path

from form_reader.extraction.pipeline import FIELD_ATTRS, FormExtractor
from form_reader.utils.config import load_config
from form_reader.utils.logger import get_logger, setup_logging
from form_reader.validation.rules_engine import RulesEngine

logger = get_logger(__name__)

_SUPPORTED_EXTENSIONS = ("*.txt",)
_META_COLUMNS = [
    "filename",
    "status",
    "fields_found",
    "processing_time_s",
    "validation_passed",
    "error",
]
_FIELD_COLUMNS = [key.value for key in FIELD_ATTRS]


def _find_documents(input_dir: Path) -> list[Path]:
    """Find all OCR transcript files in a directory.

    Args:
        input_dir: Directory to scan.

    Returns:
        Sorted list of transcript paths.
    """
    files: list[Path] = []
    for ext in _SUPPORTED_EXTENSIONS:
        files.extend(input_dir.glob(ext))
        files.extend(input_dir.glob(ext.upper()))
    return sorted(set(files))


def _read_text(source: Path) -> str:
    """Read OCR text from a file, or from stdin when ``source`` is ``-``."""
    if str(source) == "-":
        return sys.stdin.read()
    return source.read_text(encoding="utf-8")


def process_folder(
    input_dir: Path,
    output_csv: Path,
    verbose: bool = False,
    config_path: Path | None = None,
) -> dict[str, int]:
    """Extract every transcript in a folder and export the records to CSV.

    Args:
        input_dir: Directory containing ``.txt`` OCR transcripts.
        output_csv: Path for the output CSV file.
        verbose: Whether to print per-file progress.
        config_path: Optional configuration file.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    config = load_config(config_path)
    extractor = FormExtractor(config.extraction)
    validator = RulesEngine(Path(config.validation.rules_path))

    files = _find_documents(input_dir)
    if not files:
        logger.warning("No transcripts found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d transcripts to process", len(files))

    results: list[dict[str, object]] = []
    successful = 0
    failed = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        start_time = time.time()
        try:
            result = _process_single_file(file_path, extractor, validator)
            result["processing_time_s"] = round(time.time() - start_time, 3)
            results.append(result)
            successful += 1
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            results.append(
                {
                    "filename": file_path.name,
                    "status": "failed",
                    "error": str(exc),
                }
            )
            failed += 1

    _write_csv(results, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), "successful": successful, "failed": failed}
    _print_summary(summary, output_csv)
    return summary


def _process_single_file(
    file_path: Path,
    extractor: FormExtractor,
    validator: RulesEngine,
) -> dict[str, object]:
    """Extract and validate one transcript file.

    Returns:
        Row dictionary with metadata and field columns.
    """
    record = extractor.extract(_read_text(file_path))
    validation = validator.validate(record)

    result: dict[str, object] = {
        "filename": file_path.name,
        "status": "success",
        "fields_found": record.found_count(),
        "validation_passed": validation.all_valid,
        "error": None,
    }
    result.update(record.to_dict())
    return result


def _write_csv(results: list[dict[str, object]], output_path: Path) -> None:
    """Write extraction rows to a CSV file.

    Field columns are always present, in record order, so that failed
    rows and empty fields still line up.
    """
    if not results:
        return

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(
            f, fieldnames=_META_COLUMNS + _FIELD_COLUMNS, extrasaction="ignore"
        )
        writer.writeheader()
        writer.writerows(results)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    """Print batch processing summary to stdout."""
    print(f"\n{'=' * 50}")
    print("Batch Extraction Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def extract_single(source: Path, config_path: Path | None = None) -> dict[str, object]:
    """Extract one transcript and return the record with its validation.

    Args:
        source: Transcript path, or ``-`` for stdin.
        config_path: Optional configuration file.

    Returns:
        Dictionary with source, record, and validation entries.
    """
    config = load_config(config_path)
    extractor = FormExtractor(config.extraction)
    validator = RulesEngine(Path(config.validation.rules_path))

    record = extractor.extract(_read_text(source))
    report = validator.validate(record)

    return {
        "source": str(source),
        "record": record.to_dict(),
        "validation": {
            "all_valid": report.all_valid,
            "failures": [
                {"field_name": r.field_name, "rule_name": r.rule_name, "message": r.message}
                for r in report.failures()
            ],
            "warnings": report.warnings,
        },
    }


def list_fields(config_path: Path | None = None) -> list[dict[str, str]]:
    """Return the field keys and labels currently in effect."""
    config = load_config(config_path)
    extractor = FormExtractor(config.extraction)
    return [{"key": spec.key.value, "label": spec.label} for spec in extractor.specs]


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="OCR Form Reader",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", type=Path, help="Configuration YAML file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    batch_parser = subparsers.add_parser(
        "batch", help="Extract a folder of OCR transcripts"
    )
    batch_parser.add_argument(
        "input_dir", type=Path, help="Input directory with .txt transcripts"
    )
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    single_parser = subparsers.add_parser(
        "extract", help="Extract a single OCR transcript"
    )
    single_parser.add_argument(
        "file", type=Path, help="Transcript file to process, or - for stdin"
    )
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    subparsers.add_parser("fields", help="List extractable fields and labels")

    args = parser.parse_args(argv)

    setup_logging(load_config(args.config).log_level, stream=sys.stderr)

    if args.command == "batch":
        if not args.input_dir.is_dir():
            print(f"Error: {args.input_dir} is not a directory", file=sys.stderr)
            sys.exit(1)
        process_folder(args.input_dir, args.output, args.verbose, args.config)
    elif args.command == "extract":
        if str(args.file) != "-" and not args.file.exists():
            print(f"Error: {args.file} does not exist", file=sys.stderr)
            sys.exit(1)
        result = extract_single(args.file, args.config)
        output_str = json.dumps(result, indent=2)
        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(output_str)
            print(f"Output written to {args.output}")
        else:
            print(output_str)
    elif args.command == "fields":
        for field in list_fields(args.config):
            print(f"{field['key']}\t{field['label']}")
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
