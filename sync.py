#!/usr/bin/env python3
"""
Notion to Markdown Sync - Main CLI Entry Point

Fetches the pages of a Notion database, converts their block trees to
markdown with YAML frontmatter and writes them into the content collections
of a static site.
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from config_loader import ConfigLoader
from fetchers import FetcherError
from logger import setup_logging, log_section, log_config
from orchestrator import SyncOrchestrator

__version__ = "1.0.0"


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='notion-sync',
        description="Sync Notion database pages to markdown content collections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync every page
  notion-sync

  # Only pages whose status is "published"
  notion-sync --published

  # Custom config and content root
  notion-sync --config sync.yaml --output-dir site/src/content

  # Verbose logging
  notion-sync -vv
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '-p', '--published',
        action='store_true',
        help='Only sync pages whose status is "published"'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration YAML file (default: config.yaml when present)'
    )

    parser.add_argument(
        '--env-file',
        type=str,
        default=None,
        help='Path to a .env file with NOTION_KEY and DATABASE_ID (default: .env)'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        help='Content root directory (overrides export.content_root)'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Write logs to this file as well'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase verbosity (-v for INFO, -vv for DEBUG)'
    )

    return parser


def run_sync(config: dict, logger: logging.Logger) -> int:
    """
    Run the sync loop and print a short summary.

    Args:
        config: Validated configuration
        logger: Logger instance

    Returns:
        Exit code
    """
    orchestrator = SyncOrchestrator.from_config(config)
    results = orchestrator.run(published_only=config['sync'].get('published_only', False))

    written = sum(1 for result in results if result.status == 'written')
    skipped = len(results) - written
    logger.info(f"Sync complete: {written} written, {skipped} skipped")
    print(f"Synced {written} page(s) to {config['export']['content_root']} ({skipped} skipped)")

    return 0


def load_config(args: argparse.Namespace) -> dict:
    """
    Load, merge and validate the configuration, then apply its logging settings.

    Raises:
        FileNotFoundError: If an explicit config file does not exist
        ValueError: If a required value is missing or a setting is invalid
        yaml.YAMLError: If the config file is not valid YAML
    """
    config = ConfigLoader.load(args.config, env_file=args.env_file)
    config = ConfigLoader.merge_with_args(config, args)
    ConfigLoader.validate(config)

    logging_config = config.get('logging', {})
    setup_logging(
        verbosity=args.verbose,
        log_file=logging_config.get('file'),
        log_format=logging_config.get('format'),
        date_format=logging_config.get('date_format'),
        level=logging_config.get('level')
    )
    log_config(config)

    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Minimal logging until the config file is read
    setup_logging(verbosity=args.verbose)
    logger = logging.getLogger('notion_markdown_sync.cli')

    log_section("Notion to Markdown Sync")
    logger.info(f"Version: {__version__}")

    try:
        config = load_config(args)
    except FileNotFoundError as e:
        print(f"ERROR: File not found: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"ERROR: Configuration error: {e}", file=sys.stderr)
        return 2
    except yaml.YAMLError as e:
        print(f"ERROR: Invalid configuration file: {e}", file=sys.stderr)
        return 2

    try:
        return run_sync(config, logger)
    except KeyboardInterrupt:
        print("\nSync interrupted by user", file=sys.stderr)
        return 130
    except FetcherError as e:
        print(f"ERROR: Notion sync failed: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Sync aborted")
        print(f"ERROR: Unexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
