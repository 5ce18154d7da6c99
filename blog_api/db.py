import logging
import sqlite3
import time

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine


logger = logging.getLogger(__name__)

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # ON DELETE CASCADE is ignored by sqlite unless enabled per connection.
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@event.listens_for(Engine, "before_cursor_execute")
def _start_query_timer(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


@event.listens_for(Engine, "after_cursor_execute")
def _log_query_duration(conn, cursor, statement, parameters, context, executemany):
    started = conn.info["query_start_time"].pop()
    logger.debug(
        "Query executed in %.1fms: %s",
        (time.perf_counter() - started) * 1000,
        " ".join(statement.split())[:200],
    )


def init_db(app):
    db.init_app(app)

    with app.app_context():
        # Register every table before create_all.
        from blog_api import models  # noqa: F401

        db.create_all()
        logger.info("Database tables initialized")
