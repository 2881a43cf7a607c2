#!/usr/bin/env python3
"""
Fedora 3 to Fedora 4 Version-Aware Migrator

This is the main entry point for replaying exported Fedora 3 object
histories into a Fedora 4 repository.

Usage:
    python main.py migrate [--config <config.json>] [--limit N] [--dry-run] [--show-updates]
    python main.py validate-config [--config <config.json>] [--check-connection]
"""

import argparse
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from constants import ExitCode, LoggingConfig
from core.config import MigrationSettings, load_config, logging_settings
from core.errors import ConfigError, ManifestError, ObjectMigrationError, TransportError
from core.id_mapper import SimpleIdMapper
from core.migrator import Migrator
from core.recording_repository import RecordingRepository
from core.version_handler import ObjectVersionHandler
from fedora_client import FedoraConfig, FedoraRepositoryClient
from sources import ManifestObjectSource


# Setup logging with fallback locations
def setup_logging(level: str = LoggingConfig.DEFAULT_LOG_LEVEL, log_file: Optional[str] = None):
    """
    Setup logging configuration with fallback locations.

    If the primary log file location fails (permission denied, disk full, etc.),
    attempts to write to fallback locations in order:
    1. Requested location
    2. System temp directory
    3. User home directory
    4. Console-only (final fallback)

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path. If None, logs to console only.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    actual_log_file = None

    if log_file:
        log_filename = os.path.basename(log_file) or LoggingConfig.DEFAULT_LOG_FILENAME
        fallback_locations = [
            log_file,
            os.path.join(tempfile.gettempdir(), log_filename),
            os.path.join(Path.home(), log_filename),
        ]

        file_handler = None
        for fallback_path in fallback_locations:
            try:
                log_dir = os.path.dirname(fallback_path)
                if log_dir and not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)

                file_handler = logging.FileHandler(fallback_path, encoding='utf-8')
                handlers.append(file_handler)
                actual_log_file = fallback_path

                if fallback_path != log_file:
                    print(f"Note: Using fallback log file: {fallback_path}")
                break

            except PermissionError:
                print(f"  Could not create log at {fallback_path}: Permission denied")
                continue
            except OSError as e:
                print(f"  Could not create log at {fallback_path}: {e}")
                continue

        if not file_handler:
            print("Warning: Could not write log file to any location")
            print(f"  Requested: {log_file}")
            print(f"  Attempted fallbacks: {', '.join(fallback_locations[1:])}")
            print("  Logging to console only")

    logging.basicConfig(
        level=log_level,
        format=LoggingConfig.LOG_FORMAT,
        handlers=handlers,
    )

    logger = logging.getLogger(__name__)
    if actual_log_file:
        logger.info(f"Logging to: {actual_log_file}")


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    script_dir = Path(__file__).parent
    return str(script_dir / "config.json")


def print_updates(repository: RecordingRepository) -> None:
    """Print every SPARQL update a dry run would have sent."""
    for path, sparql in repository.operations("update_properties"):
        print(f"\n--- {path}")
        print(sparql)


def cmd_migrate(args) -> int:
    """Migrate the objects of the configured source directory."""
    logger = logging.getLogger(__name__)

    config_path = args.config or get_default_config_path()
    try:
        config_data = load_config(config_path)
        log_config = logging_settings(config_data)
        setup_logging(level=log_config['level'], log_file=log_config['file'])

        settings = MigrationSettings.from_dict(config_data)
        if args.limit is not None:
            settings.limit = args.limit
        if args.source:
            settings.source_dir = args.source
        if not settings.source_dir:
            raise ConfigError("migration.source_dir is required (or pass --source)")

        if args.dry_run:
            repository = RecordingRepository()
        else:
            repository = FedoraRepositoryClient(FedoraConfig.from_dict(config_data))
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return ExitCode.CONFIG_ERROR

    handler = ObjectVersionHandler(
        repository,
        SimpleIdMapper(settings.root_path),
        import_external=settings.import_external,
        import_redirect=settings.import_redirect,
    )

    try:
        source = ManifestObjectSource(settings.source_dir)
        migrator = Migrator(source, handler, limit=settings.limit, show_progress=not args.no_progress)
        summary = migrator.run()
    except ObjectMigrationError as e:
        print(f"Error: {e}")
        return ExitCode.MIGRATION_ERROR
    except ManifestError as e:
        logger.error(f"Invalid source data: {e}")
        print(f"Error: {e}")
        return ExitCode.VALIDATION_ERROR
    except TransportError as e:
        print(f"Error: {e}")
        return ExitCode.API_ERROR
    except KeyboardInterrupt:
        print("\nMigration cancelled.")
        return ExitCode.CANCELLED

    if args.dry_run:
        print(f"\nDry run: {summary}")
        print(f"  Objects created:     {len(repository.objects)}")
        print(f"  Datastreams created: {len(repository.datastreams)}")
        print(f"  Redirects:           {len(repository.redirects)}")
        print(f"  Property updates:    {len(repository.operations('update_properties'))}")
        print(f"  Snapshots:           {len(repository.operations('create_version_snapshot'))}")
        if args.show_updates:
            print_updates(repository)
    else:
        print(f"\nMigrated {summary}")

    return ExitCode.SUCCESS


def cmd_validate_config(args) -> int:
    """Check that a configuration file is complete and, optionally, that Fedora is reachable."""
    config_path = args.config or get_default_config_path()
    try:
        config_data = load_config(config_path)
        fedora_config = FedoraConfig.from_dict(config_data)
        settings = MigrationSettings.from_dict(config_data)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return ExitCode.CONFIG_ERROR

    print(f"Configuration: {config_path}")
    print(f"  Fedora:          {fedora_config.base_url}")
    print(f"  Source:          {settings.source_dir or '(not set)'}")
    print(f"  Root path:       {settings.root_path or '/'}")
    print(f"  Import external: {settings.import_external}")
    print(f"  Import redirect: {settings.import_redirect}")
    print(f"  Limit:           {'none' if settings.limit < 0 else settings.limit}")

    if settings.source_dir and not os.path.isdir(settings.source_dir):
        print(f"Warning: source directory does not exist: {settings.source_dir}")

    if args.check_connection:
        try:
            info = FedoraRepositoryClient(fedora_config).get_repository_info()
        except TransportError as e:
            print(f"Error: Could not reach Fedora: {e}")
            return ExitCode.API_ERROR
        print(f"  Connection:      OK (HTTP {info['status_code']})")

    return ExitCode.SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Fedora 3 to Fedora 4 version-aware migrator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s validate-config --config config.json --check-connection
    %(prog)s migrate --config config.json --dry-run --limit 10 --show-updates
    %(prog)s migrate --config config.json
        """,
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Migrate command
    migrate_parser = subparsers.add_parser('migrate', help='Migrate exported objects into Fedora 4')
    migrate_parser.add_argument('--config', '-c', help='Path to configuration file')
    migrate_parser.add_argument('--source', '-s', help='Override migration.source_dir')
    migrate_parser.add_argument('--limit', '-l', type=int,
                                help='Migrate at most N objects (negative for no limit)')
    migrate_parser.add_argument('--dry-run', action='store_true',
                                help='Record the migration in memory instead of writing to Fedora')
    migrate_parser.add_argument('--show-updates', action='store_true',
                                help='With --dry-run, print every SPARQL update')
    migrate_parser.add_argument('--no-progress', action='store_true',
                                help='Disable the progress bar')
    migrate_parser.set_defaults(func=cmd_migrate)

    # Validate-config command
    validate_parser = subparsers.add_parser('validate-config', help='Validate a configuration file')
    validate_parser.add_argument('--config', '-c', help='Path to configuration file')
    validate_parser.add_argument('--check-connection', action='store_true',
                                 help='Also check that the Fedora endpoint is reachable')
    validate_parser.set_defaults(func=cmd_validate_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return ExitCode.ERROR

    return int(args.func(args))


if __name__ == '__main__':
    sys.exit(main())
