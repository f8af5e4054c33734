"""
Script to create the database tables for the configured DATABASE_URL.
Existing tables are left untouched.
"""

from sqlalchemy import inspect

from trinity.db.database import engine, init_db


def create_tables():
    """Create users and body_measurements if they do not exist yet."""
    before = set(inspect(engine).get_table_names())
    init_db()
    after = set(inspect(engine).get_table_names())

    created = sorted(after - before)
    if created:
        print(f"Created table(s): {', '.join(created)}")
    else:
        print("All tables already exist. Nothing to do.")


if __name__ == "__main__":
    print(f"Database: {engine.url.render_as_string(hide_password=True)}")
    create_tables()
