#!/usr/bin/env python3
"""
tagfill command-line interface

Fills in missing artist/album/title tags and embeds cover art for every
MP3 under a library root, looking tracks up on MusicBrainz and iTunes.

Usage:
    tagfill [ROOT] [options]

ROOT defaults to ./music. The run ends once a full pass over the library
completes; faulted passes are retried after a cooldown.
"""

import argparse
import sys

from .errors import TagfillError
from .orchestrator import ConfigManager, create_runner
from .utilities.logger import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tagfill',
        description='Fill missing MP3 tags and cover art',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument('root', nargs='?', default=None,
                        help='Library root to scan (default: ./music)')
    parser.add_argument('--config', '-c', default=None,
                        help='Path to configuration file (default: tagfill.yaml)')
    parser.add_argument('--state-file', metavar='PATH',
                        help='Journal of settled files, replayed on startup')
    parser.add_argument('--check-image-first', action='store_true', default=None,
                        help='Skip files that already have a cover before checking tags')
    parser.add_argument('--dry-run', action='store_true', default=None,
                        help='Look everything up but write nothing')
    parser.add_argument('--cooldown', type=float, metavar='SECONDS',
                        help='Wait before restarting a faulted pass')
    parser.add_argument('--max-restarts', type=int, metavar='N',
                        help='Faulted passes allowed before giving up (negative = unbounded)')
    parser.add_argument('--log-file', metavar='PATH',
                        help='Also write a detailed log to this file')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose output')

    return parser


def apply_overrides(config: ConfigManager, args: argparse.Namespace) -> None:
    """Copy CLI flags that were given onto the loaded config"""
    if args.root:
        config.set('library.root', args.root)
    if args.state_file:
        config.set('state.journal_path', args.state_file)
    if args.check_image_first:
        config.set('reconcile.check_image_first', True)
    if args.dry_run:
        config.set('reconcile.dry_run', True)
    if args.cooldown is not None:
        config.set('runner.cooldown_seconds', args.cooldown)
    if args.max_restarts is not None:
        config.set('runner.max_restarts', None if args.max_restarts < 0 else args.max_restarts)
    if args.log_file:
        config.set('logging.file', args.log_file)
    if args.verbose:
        config.set('logging.level', 'DEBUG')


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = ConfigManager(args.config)
    except TagfillError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code

    apply_overrides(config, args)
    logger = setup_logging(config.log_level, config.log_file)

    try:
        runner = create_runner(config, logger=logger)
        summary = runner.run_catalog(config.library_root)
    except KeyboardInterrupt:
        logger.warning("Operation cancelled.")
        return 130
    except TagfillError as e:
        logger.error(str(e))
        return e.exit_code

    logger.info(
        f"Done: {summary.processed} processed, "
        f"{summary.already_processed} already settled, {summary.attempts} pass(es)"
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
