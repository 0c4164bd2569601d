"""
Admin-editable runtime settings.

Settings live in the `settings` table as JSON values. A RuntimeConfigStore
loads them once into an immutable RuntimeConfig; readers take snapshot()
without locking and writers go through update(), which persists the change
and swaps in a fresh snapshot.
"""

import json
import threading
from dataclasses import dataclass, asdict, replace
from typing import Optional

import config
from database import get_db_connection, transaction
from utils.logging_config import get_logger

logger = get_logger('RuntimeConfig')

APPLICATION_NAME_KEY = 'APPLICATION_NAME'
AGE_CONFIRMATION_KEY = 'AGE_CONFIRMATION'
BASE_URL_KEY = 'BASE_URL'


@dataclass(frozen=True)
class RuntimeConfig:
    application_name: str = config.APP_NAME
    age_confirmation: bool = False
    base_url: str = ""

    def to_dict(self):
        return asdict(self)


def _load_settings(conn):
    rows = conn.execute("SELECT key, data FROM settings").fetchall()
    values = {}
    for row in rows:
        try:
            values[row['key']] = json.loads(row['data'])
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable setting {row['key']!r}")
    return values


class RuntimeConfigStore:
    """Holds the current RuntimeConfig and serialises writers."""

    def __init__(self, initial: Optional[RuntimeConfig] = None):
        self._snapshot = initial or RuntimeConfig()
        self._write_lock = threading.Lock()

    @classmethod
    def load(cls) -> "RuntimeConfigStore":
        """Build a store from the settings table, falling back to defaults per key."""
        with get_db_connection() as conn:
            values = _load_settings(conn)

        defaults = RuntimeConfig()
        snapshot = RuntimeConfig(
            application_name=str(values.get(APPLICATION_NAME_KEY) or defaults.application_name),
            age_confirmation=bool(values.get(AGE_CONFIRMATION_KEY, defaults.age_confirmation)),
            base_url=str(values.get(BASE_URL_KEY) or defaults.base_url),
        )
        logger.info(f"Loaded runtime settings ({len(values)} stored)")
        return cls(snapshot)

    def snapshot(self) -> RuntimeConfig:
        return self._snapshot

    def update(self, application_name: Optional[str] = None,
               age_confirmation: Optional[bool] = None,
               base_url: Optional[str] = None) -> RuntimeConfig:
        """
        Persist the given settings and publish a new snapshot.

        None leaves a setting unchanged; an empty application name is ignored.
        """
        changes = {}
        if application_name:
            changes[APPLICATION_NAME_KEY] = ('application_name', application_name)
        if age_confirmation is not None:
            changes[AGE_CONFIRMATION_KEY] = ('age_confirmation', bool(age_confirmation))
        if base_url is not None:
            changes[BASE_URL_KEY] = ('base_url', base_url)

        with self._write_lock:
            if not changes:
                return self._snapshot

            with get_db_connection() as conn:
                with transaction(conn):
                    conn.executemany(
                        """
                        INSERT INTO settings (key, data) VALUES (?, ?)
                        ON CONFLICT(key) DO UPDATE SET data = excluded.data
                        """,
                        [(key, json.dumps(value)) for key, (_, value) in changes.items()],
                    )

            self._snapshot = replace(
                self._snapshot,
                **{field_name: value for field_name, value in changes.values()},
            )
            logger.info(f"Updated runtime settings: {', '.join(sorted(changes))}")
            return self._snapshot
