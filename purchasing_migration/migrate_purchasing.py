from __future__ import annotations

import argparse
import logging
import sys

from purchasing_migration.config import ConfigurationError, load_settings
from purchasing_migration.db import open_databases
from purchasing_migration.logging_config import setup_logging
from purchasing_migration.services.migration_service import run_migration


logger = logging.getLogger('purchasing_migration')


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Migrate suppliers, purchase orders, costs and receipts from the legacy database.'
    )
    parser.add_argument('--dry-run', action='store_true', default=None, help='Compute everything but write nothing.')
    parser.add_argument(
        '--reset-target',
        action='store_true',
        default=None,
        help='Delete existing purchasing rows for the target organization before writing.',
    )
    parser.add_argument(
        '--print-costs',
        action='store_true',
        default=None,
        help='Print the per purchase order cost breakdown.',
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    overrides = {
        key: value
        for key, value in {
            'dry_run': args.dry_run,
            'reset_target': args.reset_target,
            'print_costs': args.print_costs,
        }.items()
        if value is not None
    }

    try:
        settings = load_settings(**overrides)
    except (ConfigurationError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    setup_logging(settings.log_level)
    if settings.reset_target and settings.dry_run:
        logger.info('RESET_TARGET ignored under DRY_RUN')

    try:
        with open_databases(settings) as databases:
            run_migration(databases, settings)
    except Exception:
        logger.exception('Purchase migration failed')
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
