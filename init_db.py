#!/usr/bin/env python
"""Database initialization script for the classifieds backend.

Creates the listings and messages tables. With --reset the tables are
dropped first, which deletes every listing and message.

Usage:
    python init_db.py [--reset]
"""

import os
import sys
from classifieds import create_app, db
from classifieds.models import COLLECTIONS


def init_database(reset=False):
    """Create (and optionally drop first) every collection table."""
    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)

    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")

    with app.app_context():
        try:
            print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")
            if reset:
                print("Dropping all tables...")
                db.drop_all()

            print("Creating database tables...")
            db.create_all()

            print("Created tables:")
            for name, model in COLLECTIONS.items():
                print(f"  ✓ {model.__tablename__:<15} - {name} collection")

            print(f"\n{'='*60}")
            print("✅ Database initialization complete!")
            print(f"{'='*60}\n")
            print("Next step: start the server with python wsgi.py\n")
            return True

        except Exception as e:
            db.session.rollback()
            print(f"❌ Error creating database: {type(e).__name__}: {e}\n")
            return False


if __name__ == '__main__':
    success = init_database(reset='--reset' in sys.argv[1:])
    sys.exit(0 if success else 1)
