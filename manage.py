"""Maintenance commands: schema creation and admin accounts.

    python manage.py init-db
    python manage.py create-admin alice --password s3cret --role superadmin
"""
import argparse
import getpass
import logging
import sys

from Controller.admin_controller import create_admin
from database import SessionLocal, init_db
from logging_setup import setup_logger

logger = logging.getLogger("manage")


def cmd_init_db(args):
    init_db()
    logger.info("Database schema is up to date")
    return 0


def cmd_create_admin(args):
    init_db()
    password = args.password or getpass.getpass("Password: ")
    db = SessionLocal()
    try:
        admin = create_admin(db, args.username, password, args.role)
    except ValueError as e:
        logger.error("%s", e)
        return 1
    finally:
        db.close()
    print(f"Admin '{admin.username}' created with id {admin.id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="manage.py", description="Telemedicine API maintenance")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create all tables").set_defaults(func=cmd_init_db)

    admin = sub.add_parser("create-admin", help="add an admin account")
    admin.add_argument("username")
    admin.add_argument("--password", help="prompted for when omitted")
    admin.add_argument("--role", default="admin")
    admin.set_defaults(func=cmd_create_admin)
    return parser


def main(argv=None) -> int:
    setup_logger()
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
