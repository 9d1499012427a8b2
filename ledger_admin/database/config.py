import os

import pymysql.cursors


def mysql_settings(db_required=True):
    """
    Connection arguments for the ledger store, read from the environment at
    call time. `db_required=False` leaves out the schema name so the store can
    create it on first start.
    """
    settings = {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
        "charset": "utf8mb4",
        "cursorclass": pymysql.cursors.DictCursor,
    }
    if db_required:
        settings["database"] = os.getenv("DB_NAME", "ledger_admin_db")
    return settings


def database_name(overrides=None):
    return (overrides or {}).get("database") or mysql_settings().get("database")
