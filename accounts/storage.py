"""Account persistence over an embedded key-value engine.

The engine exposes get/put/delete over named buckets. SqliteEngine is the
durable on-disk implementation; MemoryEngine backs the tests. AccountStore
owns both the accounts bucket and the current-session slot.
"""

import logging
import os
import sqlite3
import stat
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

from pydantic import ValidationError

from accounts.config import CURRENT_USER_BUCKET, CURRENT_USER_KEY, USERS_BUCKET
from accounts.models import Account

logger = logging.getLogger(__name__)

# Secure file permission: owner read/write only (0600 in octal)
SECURE_FILE_MODE = stat.S_IRUSR | stat.S_IWUSR


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageCorruptedError(StorageError):
    """Stored record exists but cannot be decoded."""
    pass


class KeyValueEngine:
    """Bucketed byte store used by AccountStore."""

    def ensure_buckets(self, *names: str) -> None:
        raise NotImplementedError

    def get(self, bucket: str, key: str) -> Optional[bytes]:
        raise NotImplementedError

    def put(self, bucket: str, key: str, value: bytes) -> None:
        raise NotImplementedError

    def delete(self, bucket: str, key: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class MemoryEngine(KeyValueEngine):
    """Dict-backed engine; nothing survives the process."""

    def __init__(self):
        self.buckets: dict[str, dict[str, bytes]] = {}

    def ensure_buckets(self, *names: str) -> None:
        for name in names:
            self.buckets.setdefault(name, {})

    def _bucket(self, bucket: str) -> dict[str, bytes]:
        try:
            return self.buckets[bucket]
        except KeyError:
            raise StorageError(f"Bucket not found: {bucket}")

    def get(self, bucket: str, key: str) -> Optional[bytes]:
        return self._bucket(bucket).get(key)

    def put(self, bucket: str, key: str, value: bytes) -> None:
        self._bucket(bucket)[key] = value

    def delete(self, bucket: str, key: str) -> None:
        self._bucket(bucket).pop(key, None)


def _set_secure_permissions(filepath: str) -> None:
    """Restrict the store file to its owner on Unix systems."""
    if sys.platform == "win32":
        return

    try:
        os.chmod(filepath, SECURE_FILE_MODE)
    except OSError as e:
        logger.warning("Could not restrict permissions on %s: %s", filepath, e)


def _quote(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class SqliteEngine(KeyValueEngine):
    """Durable engine with one SQLite table per bucket.

    Every write runs in its own transaction and is committed before the
    call returns.
    """

    def __init__(self, path: str):
        self.path = path
        self._buckets: set[str] = set()

        directory = os.path.dirname(os.path.abspath(path))
        try:
            if sys.platform != "win32":
                os.makedirs(directory, mode=0o700, exist_ok=True)
            else:
                os.makedirs(directory, exist_ok=True)
            self._conn = sqlite3.connect(path)
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Failed to open {path}: {e}")

        _set_secure_permissions(path)

    def ensure_buckets(self, *names: str) -> None:
        try:
            with self._conn:
                for name in names:
                    self._conn.execute(
                        f"CREATE TABLE IF NOT EXISTS {_quote(name)} "
                        "(key TEXT PRIMARY KEY, value BLOB NOT NULL)"
                    )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to create buckets in {self.path}: {e}")
        self._buckets.update(names)

    def _table(self, bucket: str) -> str:
        if bucket not in self._buckets:
            raise StorageError(f"Bucket not found: {bucket}")
        return _quote(bucket)

    def get(self, bucket: str, key: str) -> Optional[bytes]:
        table = self._table(bucket)
        try:
            row = self._conn.execute(
                f"SELECT value FROM {table} WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {bucket}/{key}: {e}")
        return None if row is None else bytes(row[0])

    def put(self, bucket: str, key: str, value: bytes) -> None:
        table = self._table(bucket)
        try:
            with self._conn:
                self._conn.execute(
                    f"INSERT OR REPLACE INTO {table} (key, value) VALUES (?, ?)",
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {bucket}/{key}: {e}")

    def delete(self, bucket: str, key: str) -> None:
        table = self._table(bucket)
        try:
            with self._conn:
                self._conn.execute(f"DELETE FROM {table} WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete {bucket}/{key}: {e}")

    def close(self) -> None:
        self._conn.close()


class AccountStore:
    """CRUD over accounts plus the single current-session slot."""

    def __init__(self, engine: KeyValueEngine):
        self.engine = engine
        engine.ensure_buckets(USERS_BUCKET, CURRENT_USER_BUCKET)

    def get(self, username: str) -> Optional[Account]:
        """Load an account by username.

        Returns:
            The account, or None if the username is not registered

        Raises:
            StorageCorruptedError: If the stored record cannot be decoded
        """
        data = self.engine.get(USERS_BUCKET, username)
        if data is None:
            return None
        try:
            account = Account.from_json(data)
        except ValidationError as e:
            raise StorageCorruptedError(f"Invalid account record for {username}: {e}")

        if account.hashed_password is None:
            raise StorageCorruptedError(f"Account record for {username} has no password hash")
        return account

    def put(self, username: str, account: Account) -> None:
        """Overwrite the full record stored under username."""
        if account.hashed_password is None:
            raise ValueError("Refusing to store an account without a password hash")
        if account.username != username:
            raise ValueError(f"Record username {account.username!r} does not match key {username!r}")
        self.engine.put(USERS_BUCKET, username, account.to_json().encode("utf-8"))

    def get_current_username(self) -> Optional[str]:
        """Username held by the session marker, without loading its record."""
        data = self.engine.get(CURRENT_USER_BUCKET, CURRENT_USER_KEY)
        if data is None:
            return None
        return data.decode("utf-8")

    def get_current_session(self) -> Optional[Account]:
        username = self.get_current_username()
        if username is None:
            return None

        account = self.get(username)
        if account is None:
            logger.warning("Session marker points at unknown user %s", username)
        return account

    def set_current_session(self, account: Account) -> None:
        self.engine.put(CURRENT_USER_BUCKET, CURRENT_USER_KEY, account.username.encode("utf-8"))

    def clear_current_session(self) -> None:
        self.engine.delete(CURRENT_USER_BUCKET, CURRENT_USER_KEY)


@contextmanager
def open_store(path: str) -> Iterator[AccountStore]:
    """Open the on-disk store for one command and always close it.

    Args:
        path: SQLite file location, created if missing

    Yields:
        AccountStore bound to the opened engine
    """
    engine = SqliteEngine(path)
    try:
        yield AccountStore(engine)
    finally:
        engine.close()
