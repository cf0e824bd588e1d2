"""Populate the database with initial records.

Run: python seed.py   (or: flask seed)

Each seeder is a callable that takes the SQLAlchemy session and adds
records to it. SEEDERS is empty until the app has real seed data.
"""

import logging
import sys

from app import app, db

log = logging.getLogger("seed")

SEEDERS = []


def configure_logging():
    logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="%(levelname)s %(name)s %(message)s")


def close_connections():
    db.session.remove()
    db.engine.dispose()


def run_seed(seeders=None, disconnect=None):
    """Run the seeders and return a process exit code (0 ok, 1 failed).

    ``disconnect`` runs exactly once whether or not seeding succeeded.
    """
    seeders = SEEDERS if seeders is None else seeders
    disconnect = disconnect or close_connections
    with app.app_context():
        try:
            log.info("Starting database seed...")
            for seeder in seeders:
                seeder(db.session)
            db.session.commit()
            log.info("Seed completed successfully!")
            return 0
        except Exception:
            log.exception("Error during seed")
            db.session.rollback()
            return 1
        finally:
            disconnect()


if __name__ == "__main__":
    configure_logging()
    sys.exit(run_seed())
