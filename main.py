#!/usr/bin/env python3
"""
Race Card Extraction System - Main Entry Point.

Command-line interface and programmatic access to the extraction
pipeline.

Usage:
    Command Line:
        python main.py --input card.pdf
        python main.py --input ./programs/ --output results.json

    Python:
        from main import run_extraction
        results = run_extraction("card.pdf")

Author: Railbird Engineering Team
Version: 1.0.0
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

# Import project modules
from config import ConfigurationManager
from racecard_extraction.utils.logger import setup_logger_from_config, get_logger
from racecard_extraction.utils.helpers import ensure_directory
from racecard_extraction.utils.exceptions import RaceCardExtractionError


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Race Card Extraction System",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Process a single program:
        python main.py --input card.pdf

    Process a directory and save the results:
        python main.py --input ./programs/ --output results.json

    Declare the file kind explicitly:
        python main.py --input upload.bin --kind png
        """
    )

    # Input/Output arguments
    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Input file or directory containing race programs"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Write JSON results to this file instead of stdout"
    )

    parser.add_argument(
        "--kind", "-k",
        type=str,
        choices=["pdf", "jpg", "jpeg", "png"],
        default=None,
        help="Declared file kind (single file only; default: file extension)"
    )

    # Processing options
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)

    if args.debug:
        config.set("logging.level", "DEBUG")
    elif args.quiet:
        config.set("logging.level", "ERROR")

    logger = setup_logger_from_config()

    logger.info("=" * 60)
    logger.info("RACE CARD EXTRACTION SYSTEM")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")

    return config


def run_extraction(
    input_path: str,
    file_kind: Optional[str] = None,
    config_path: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    Run the extraction pipeline on a file or a directory.

    Args:
        input_path: Path to a race program or a directory of them.
        file_kind: Declared kind for a single file.
        config_path: Optional custom configuration file path.

    Returns:
        One result dictionary per processed file. A missing or invalid
        single file yields one failed result.

    Example:
        >>> results = run_extraction("programs/")
        >>> for r in results:
        ...     print(r['sourceFile'], r['success'])
    """
    ConfigurationManager(config_path)

    from racecard_extraction.document_parser import DocumentParser

    parser = DocumentParser()
    input_p = Path(input_path)

    if input_p.is_dir():
        results = parser.process_batch(input_p)
    else:
        results = [parser.process_file(input_p, file_kind)]

    return [result.to_dict(include_metadata=True) for result in results]


def write_results(results: List[Dict[str, Any]], output_path: Optional[str]) -> None:
    """Write results as JSON to a file, or to stdout when no path is given."""
    payload = json.dumps(results, indent=2, ensure_ascii=False)

    if output_path is None:
        print(payload)
        return

    output_p = Path(output_path)
    ensure_directory(output_p.parent)
    output_p.write_text(payload + "\n", encoding="utf-8")
    get_logger(__name__).info(f"Results written to: {output_p}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code: 0 when every file succeeded, 1 otherwise, 130 when
        interrupted.
    """
    try:
        args = parse_arguments(argv)

        initialize_system(args)
        logger = get_logger(__name__)

        results = run_extraction(
            input_path=args.input,
            file_kind=args.kind,
            config_path=args.config
        )

        write_results(results, args.output)

        failed = [r for r in results if not r['success']]
        logger.info("=" * 60)
        logger.info(
            f"Extraction complete. Processed {len(results)} file(s), "
            f"{len(failed)} failed."
        )
        logger.info("=" * 60)

        if not results:
            logger.error("No files to process")
            return 1

        return 1 if failed else 0

    except RaceCardExtractionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if "--debug" in sys.argv:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
