import pymysql

from ledger_admin.database.config import mysql_settings


def get_db_connection(db_required=True, config=None):
    """Open a pymysql connection from explicit settings or the environment."""
    params = dict(config) if config is not None else mysql_settings(db_required=db_required)
    if not db_required:
        params.pop('database', None)
    return pymysql.connect(**params)
