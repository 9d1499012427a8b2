from decimal import Decimal
from datetime import datetime, date

from ledger_admin.database.base import get_db_connection

# --- Centralized Normalization Functions ---

def normalize_value(value):
    """Recursively normalize values so documents stay JSON-serializable."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return normalize_row(value)
    if isinstance(value, (list, tuple, set)):
        return [normalize_value(v) for v in value]
    return value

def normalize_row(row):
    """Normalize all values in a row/document dictionary."""
    return {k: normalize_value(v) for k, v in row.items()}

def normalize_rows(rows):
    """Normalize a list of row dictionaries."""
    return [normalize_row(r) for r in rows]

# --- DBManager Class ---

class DBManager:
    """
    Handles connection/cursor lifecycle for every statement.
    A connection is opened per call and always closed afterwards.
    """

    def __init__(self, config=None):
        self.config = config

    def _connect(self, db_required=True):
        return get_db_connection(db_required=db_required, config=self.config)

    def execute_query(self, query, params=None, fetch=None):
        """
        Executes a read-only query and returns normalized data.
        Supports fetch='one' or fetch='all'.
        """
        conn = self._connect()
        try:
            with conn.cursor() as cursor:
                cursor.execute(query, params or ())

                if fetch == 'one':
                    row = cursor.fetchone()
                    return normalize_row(row) if row else None

                if fetch == 'all':
                    rows = cursor.fetchall()
                    return normalize_rows(rows) if rows else []

                return None
        except Exception:
            conn.rollback()  # clears locks held by the failed statement
            raise
        finally:
            conn.close()

    def execute_write_query(self, query, params=None):
        """
        Executes a write query (INSERT, UPDATE, DELETE).
        Commits if successful, rolls back on error.
        Returns the number of affected rows.
        """
        conn = self._connect()
        try:
            with conn.cursor() as cursor:
                affected = cursor.execute(query, params or ())
            conn.commit()
            return affected
        except Exception:
            conn.rollback()   # no partial insert/update
            raise
        finally:
            conn.close()

    def execute_bulk_write_query(self, query, params_list):
        """
        Executes a bulk write query using executemany.
        params_list should be a list of tuples/lists.
        """
        conn = self._connect()
        try:
            with conn.cursor() as cursor:
                affected = cursor.executemany(query, params_list or [])
            conn.commit()
            return affected
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def execute_script(self, statements, db_required=True):
        """Runs DDL statements in order on a single connection."""
        conn = self._connect(db_required=db_required)
        try:
            with conn.cursor() as cursor:
                for statement in statements:
                    cursor.execute(statement)
            conn.commit()
        finally:
            conn.close()
