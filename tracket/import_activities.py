"""CLI utility to import activities from a CSV export."""

import argparse
import json

from tracket.app import create_app, db
from tracket.services.csv_import import import_csv_file


def _build_parser():
    parser = argparse.ArgumentParser(
        description=(
            'Import activities from a CSV export (one activity per row). '
            'Set DATABASE_URL to a persistent database; the default in-memory '
            'store is discarded when the command exits.'
        ),
    )
    parser.add_argument(
        '--file',
        required=True,
        help='Path to a CSV file with the standard activity export header.',
    )
    parser.add_argument(
        '--env',
        default='development',
        choices=['development', 'testing', 'production'],
        help='App config environment to use (default: development).',
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Validate and preview results without committing database changes.',
    )
    return parser


def main(argv=None):
    args = _build_parser().parse_args(argv)
    app = create_app(args.env)

    if not args.dry_run and app.config['SQLALCHEMY_DATABASE_URI'].endswith(':memory:'):
        app.logger.warning('DATABASE_URL is not set; imported activities will not be kept')

    with app.app_context():
        result = import_csv_file(args.file, commit=not args.dry_run)
        if args.dry_run:
            db.session.rollback()
            result['dry_run'] = True
        print(json.dumps(result, indent=2))
        return 0


if __name__ == '__main__':
    raise SystemExit(main())
