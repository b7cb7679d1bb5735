"""Repository layer responsible for room persistence."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from hotel.domain.models import Room
from hotel.repository.room_codec import decode_room, encode_bounded
from hotel.utils.config import Settings, get_settings
from hotel.utils.logger import get_logger


logger = get_logger(__name__)


def _key(number: int) -> str:
    # Decimal text keeps the full unsigned 64-bit range; sqlite INTEGER is signed.
    return str(number)


class RoomRepository:
    """Key-value store of encoded rooms keyed by room number."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._db_path

    @property
    def max_room_bytes(self) -> int:
        return self._settings.max_room_bytes

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        return connection

    def initialize_database(self) -> None:
        """Create the room table if it does not exist yet."""
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS Rooms (
                        number TEXT PRIMARY KEY,
                        payload BLOB NOT NULL,
                        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )
                conn.commit()
            logger.info("Room store initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Database initialization failed: {exc}") from exc

    def get_room(self, number: int) -> Optional[Room]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT payload FROM Rooms WHERE number = ?;",
                    (_key(number),),
                ).fetchone()
        except sqlite3.Error as exc:
            raise RuntimeError(f"Failed to read room {number}: {exc}") from exc
        if row is None:
            return None
        return decode_room(bytes(row["payload"]))

    def insert_room(self, room: Room) -> bool:
        """Store a new room; return False when the number is already taken."""
        payload = encode_bounded(room, self.max_room_bytes)
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO Rooms (number, payload) VALUES (?, ?);",
                    (_key(room.number), payload),
                )
                conn.commit()
        except sqlite3.IntegrityError:
            return False
        except sqlite3.Error as exc:
            raise RuntimeError(f"Failed to insert room {room.number}: {exc}") from exc
        return True

    def save_room(self, room: Room) -> bool:
        """Overwrite an existing room; return False when it is not stored."""
        payload = encode_bounded(room, self.max_room_bytes)
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    UPDATE Rooms
                    SET payload = ?, updated_at = CURRENT_TIMESTAMP
                    WHERE number = ?;
                    """,
                    (payload, _key(room.number)),
                )
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as exc:
            raise RuntimeError(f"Failed to save room {room.number}: {exc}") from exc

    def delete_room(self, number: int) -> bool:
        try:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM Rooms WHERE number = ?;", (_key(number),))
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as exc:
            raise RuntimeError(f"Failed to delete room {number}: {exc}") from exc

    def count_rooms(self) -> int:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT COUNT(*) AS count FROM Rooms;").fetchone()
        except sqlite3.Error as exc:
            raise RuntimeError(f"Failed to count rooms: {exc}") from exc
        return int(row["count"])
