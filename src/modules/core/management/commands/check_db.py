"""Probe the configured database the way the legacy service did on startup."""

from __future__ import annotations

import structlog
from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError, connections

logger = structlog.get_logger(__name__)

REMEDIATION_STEPS = (
    "Start the database server (e.g. the MySQL service).",
    "Create the database and run `python manage.py migrate`.",
    "Check DATABASE_URL or DB_HOST, DB_USER, DB_PASS and DB_NAME in .env.",
)


class Command(BaseCommand):
    help = "Acquire a database connection, run SELECT 1 and release it."

    def add_arguments(self, parser):
        parser.add_argument(
            "--database",
            default="default",
            help="Database alias to check (default: %(default)s).",
        )

    def handle(self, *args, **options):
        alias = options["database"]
        conn = connections[alias]
        try:
            conn.ensure_connection()
            with conn.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except DatabaseError as exc:
            logger.error(
                "db.connection_failed",
                database=alias,
                error=str(exc),
                steps=list(REMEDIATION_STEPS),
            )
            for number, step in enumerate(REMEDIATION_STEPS, start=1):
                self.stderr.write(f"  {number}. {step}")
            raise CommandError(f"Database connection failed: {exc}") from exc
        finally:
            conn.close()

        logger.info("db.connected", database=alias, vendor=conn.vendor)
        self.stdout.write(self.style.SUCCESS("Database connected successfully."))
