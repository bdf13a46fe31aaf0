# =============================================================================
# racf_core/offline/local_database.py
# Local SQLite Record Store for user records
# =============================================================================
"""
LocalDatabase - SQLite-based store for user records.

Features:
- Automatic schema creation
- Records keyed by ``id`` with a secondary index on ``userid``
- Every mutation commits immediately
- Thread-local connections, so bulk actions can run from a worker pool
"""

from __future__ import annotations
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple
import logging

from racf_core.errors import DuplicateKeyError, StorageError, UserNotFoundError
from racf_core.models.user import UPDATABLE_FIELDS, UserRecord

logger = logging.getLogger(__name__)


COLUMNS = (
    "id",
    "userid",
    "name",
    "default_group",
    "owner",
    "status",
    "created_at",
    "auth_option",
    "expiration",
)


class LocalDatabase:
    """
    Local SQLite database holding the user records used while the remote
    user service is unreachable.
    """

    DEFAULT_DB_PATH = Path("local_data") / "racf_users.db"

    SCHEMA = {
        "users": """
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                userid TEXT NOT NULL,
                name TEXT NOT NULL,
                default_group TEXT NOT NULL,
                owner TEXT NOT NULL,
                status TEXT NOT NULL,
                created_at TEXT NOT NULL,
                auth_option TEXT,
                expiration TEXT
            )
        """,
        "idx_users_userid": """
            CREATE INDEX IF NOT EXISTS idx_users_userid ON users (userid)
        """,
    }

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize local database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self._ensure_directory()
        self._local = threading.local()
        self._connections: List[Tuple[threading.Thread, sqlite3.Connection]] = []
        self._connections_lock = threading.Lock()
        self._initialized = False

    def _ensure_directory(self) -> None:
        """Ensure database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            try:
                connection = sqlite3.connect(str(self.db_path), check_same_thread=False)
            except sqlite3.Error as e:
                raise StorageError(
                    f"Cannot open local database: {e}",
                    operation="connect",
                    path=str(self.db_path),
                ) from e
            connection.row_factory = sqlite3.Row
            self._local.connection = connection
            with self._connections_lock:
                self._release_finished_threads()
                self._connections.append((threading.current_thread(), connection))
        return self._local.connection

    def _release_finished_threads(self) -> None:
        """Close connections whose owning thread has exited. Caller holds the lock."""
        alive = []
        for owner, connection in self._connections:
            if owner.is_alive():
                alive.append((owner, connection))
            else:
                connection.close()
        self._connections = alive

    @property
    def open_connections(self) -> int:
        """Number of connections currently held open."""
        with self._connections_lock:
            self._release_finished_threads()
            return len(self._connections)

    @contextmanager
    def transaction(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Run statements in a transaction that is committed before returning."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            if isinstance(e, sqlite3.IntegrityError):
                raise
            raise StorageError(
                f"Local database {operation} failed: {e}",
                operation=operation,
                path=str(self.db_path),
            ) from e
        except Exception:
            conn.rollback()
            raise

    def _query(self, sql: str, params: Optional[List[Any]] = None) -> List[sqlite3.Row]:
        self.initialize()
        try:
            return self._get_connection().execute(sql, params or []).fetchall()
        except sqlite3.Error as e:
            raise StorageError(
                f"Local database read failed: {e}",
                operation="read",
                path=str(self.db_path),
            ) from e

    def initialize(self) -> None:
        """Initialize database schema."""
        if self._initialized:
            return

        with self.transaction("initialize") as conn:
            for name, schema in self.SCHEMA.items():
                conn.execute(schema)
                logger.debug(f"Created/verified: {name}")

        self._initialized = True
        logger.info(f"Local database initialized at: {self.db_path}")

    # =========================================================================
    # ROW MAPPING
    # =========================================================================

    @staticmethod
    def _to_record(row: sqlite3.Row) -> UserRecord:
        return UserRecord(**{column: row[column] for column in COLUMNS})

    @staticmethod
    def _to_row(record: UserRecord) -> Dict[str, Any]:
        data = asdict(record)
        return {column: data[column] for column in COLUMNS}

    # =========================================================================
    # READS
    # =========================================================================

    def list_all(self) -> List[UserRecord]:
        """All records ordered by userid ascending."""
        rows = self._query("SELECT * FROM users ORDER BY userid ASC, id ASC")
        return [self._to_record(row) for row in rows]

    def get_by_id(self, record_id: str) -> Optional[UserRecord]:
        rows = self._query("SELECT * FROM users WHERE id = ?", [record_id])
        return self._to_record(rows[0]) if rows else None

    def find_by_userid(self, userid: str) -> Optional[UserRecord]:
        """Exact match on the stored (already uppercased) userid."""
        rows = self._query("SELECT * FROM users WHERE userid = ? LIMIT 1", [userid])
        return self._to_record(rows[0]) if rows else None

    def count(self) -> int:
        rows = self._query("SELECT COUNT(*) AS count FROM users")
        return rows[0]["count"] if rows else 0

    # =========================================================================
    # WRITES
    # =========================================================================

    def insert(self, record: UserRecord) -> UserRecord:
        """
        Insert a record.

        Raises:
            DuplicateKeyError: if a record with the same id exists
        """
        self.insert_many([record])
        return record

    def insert_many(self, records: List[UserRecord]) -> int:
        """Insert several records in a single transaction."""
        if not records:
            return 0

        self.initialize()
        placeholders = ", ".join("?" for _ in COLUMNS)
        sql = f"INSERT INTO users ({', '.join(COLUMNS)}) VALUES ({placeholders})"

        current_id = None
        try:
            with self.transaction("insert") as conn:
                for record in records:
                    current_id = record.id
                    row = self._to_row(record)
                    conn.execute(sql, [row[column] for column in COLUMNS])
        except sqlite3.IntegrityError as e:
            raise DuplicateKeyError(current_id) from e

        logger.debug(f"Inserted {len(records)} record(s) into local store")
        return len(records)

    def update(self, record_id: str, fields: Dict[str, Any]) -> UserRecord:
        """
        Merge ``fields`` into an existing record. Columns not named in
        ``fields`` are left untouched.

        Raises:
            UserNotFoundError: if no record has this id
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update column(s): {', '.join(sorted(unknown))}")

        self.initialize()
        if fields:
            set_clause = ", ".join(f"{column} = ?" for column in fields)
            values = list(fields.values()) + [record_id]
            with self.transaction("update") as conn:
                cursor = conn.execute(f"UPDATE users SET {set_clause} WHERE id = ?", values)
                found = cursor.rowcount > 0
            if not found:
                raise UserNotFoundError(record_id)

        record = self.get_by_id(record_id)
        if record is None:
            raise UserNotFoundError(record_id)
        return record

    def delete(self, record_id: str) -> bool:
        """Delete a record. Returns False if it was already absent."""
        self.initialize()
        with self.transaction("delete") as conn:
            cursor = conn.execute("DELETE FROM users WHERE id = ?", [record_id])
            return cursor.rowcount > 0

    def clear(self) -> int:
        """Remove every record. The seeding flag is stored elsewhere and survives."""
        self.initialize()
        with self.transaction("clear") as conn:
            return conn.execute("DELETE FROM users").rowcount

    def close(self) -> None:
        """Close every connection opened by this database."""
        with self._connections_lock:
            for _, connection in self._connections:
                connection.close()
            self._connections.clear()
        self._local = threading.local()

