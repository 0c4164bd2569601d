#!/usr/bin/env python3
"""
Management commands.

Usage:
    python manage.py                       # same as "run"
    python manage.py run
    python manage.py migrate
    python manage.py add-user --username alice --password secret
    python manage.py add-admin-user --username root --password secret
    python manage.py gc-tags
    python manage.py respace-pool --pool-id 3
    python manage.py respace-pool --all
"""

import argparse
import sys

from tqdm import tqdm

import config
from database import get_db_connection, initialize_database
from utils.errors import TagpoolError
from utils.logging_config import setup_logging


def cmd_run(args):
    import uvicorn
    from app import create_app

    app = create_app()
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")
    return 0


def cmd_migrate(args):
    initialize_database()
    print("Database is up to date.")
    return 0


def _add_user(args, is_admin):
    from repositories.user_repository import create_user

    initialize_database()
    user = create_user(args.username, args.password, is_admin=is_admin)
    print(f"Created {'admin ' if is_admin else ''}user '{user.username}' (id {user.id})")
    return 0


def cmd_add_user(args):
    return _add_user(args, is_admin=False)


def cmd_add_admin_user(args):
    return _add_user(args, is_admin=True)


def cmd_gc_tags(args):
    from repositories.tag_repository import garbage_collect_tags

    initialize_database()
    print(f"Removed {garbage_collect_tags()} unused tags")
    return 0


def cmd_respace_pool(args):
    from services.pool_service import respace_pool_positions

    initialize_database()
    if args.all:
        with get_db_connection() as conn:
            pool_ids = [row['id'] for row in conn.execute("SELECT id FROM pools ORDER BY id").fetchall()]
    else:
        pool_ids = [args.pool_id]

    total = 0
    for pool_id in tqdm(pool_ids, desc="Respacing pools", disable=len(pool_ids) < 2):
        total += respace_pool_positions(pool_id)
    print(f"Respaced {total} pool entries in {len(pool_ids)} pool(s)")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description=f'{config.APP_NAME} management commands',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest='command')

    run = subparsers.add_parser('run', help='Start the web server (default)')
    run.add_argument('--host', default=config.FLASK_HOST)
    run.add_argument('--port', type=int, default=config.FLASK_PORT)
    run.set_defaults(func=cmd_run)

    migrate = subparsers.add_parser('migrate', help='Create missing tables and indexes')
    migrate.set_defaults(func=cmd_migrate)

    for name, func, help_text in (
        ('add-user', cmd_add_user, 'Create a regular user'),
        ('add-admin-user', cmd_add_admin_user, 'Create an administrator'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('--username', '-u', required=True)
        sub.add_argument('--password', '-p', required=True)
        sub.set_defaults(func=func)

    gc_tags = subparsers.add_parser('gc-tags', help='Delete tags no post uses')
    gc_tags.set_defaults(func=cmd_gc_tags)

    respace = subparsers.add_parser('respace-pool', help='Rewrite pool positions to 1, 2, 3, ...')
    target = respace.add_mutually_exclusive_group(required=True)
    target.add_argument('--pool-id', type=int)
    target.add_argument('--all', action='store_true', help='Respace every pool')
    respace.set_defaults(func=cmd_respace_pool)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(['run', *(argv or [])])

    setup_logging(level=config.LOG_LEVEL)
    try:
        return args.func(args)
    except TagpoolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
