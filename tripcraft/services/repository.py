"""
Itinerary Repository.
Stores saved itinerary snapshots in a local SQLite database, one row per save.
"""
import sqlite3
import logging
import json
import os
import uuid
from datetime import datetime, timezone
from typing import List, Dict, Optional, Tuple

from ..config import settings
from ..errors import PersistenceError
from ..models.itinerary import Itinerary, SavedItinerary

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS itineraries (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    destination TEXT NOT NULL,
    duration INTEGER NOT NULL,
    budget TEXT NOT NULL,
    interests TEXT NOT NULL,
    travel_style TEXT NOT NULL,
    pace TEXT NOT NULL,
    food_preferences TEXT NOT NULL,
    itinerary_data TEXT NOT NULL,
    generated_at TEXT NOT NULL,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_itineraries_user ON itineraries (user_id, created_at);
"""


class ItineraryRepository:
    """Saved itineraries, scoped by the owning user."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or settings.database_path
        directory = os.path.dirname(os.path.abspath(self.db_path))
        os.makedirs(directory, exist_ok=True)
        self._execute_script(SCHEMA)

    def _get_connection(self) -> sqlite3.Connection:
        """Create a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _execute_script(self, script: str):
        conn = self._get_connection()
        try:
            conn.executescript(script)
        finally:
            conn.close()

    def _query_db(self, query: str, args: Tuple = ()) -> List[Dict]:
        """Run a read query and return plain dict rows."""
        conn = self._get_connection()
        try:
            rows = conn.execute(query, args).fetchall()
            return [dict(row) for row in rows]
        except sqlite3.Error as e:
            logger.error(f"Query error in {self.db_path}: {e}")
            raise PersistenceError("Failed to load saved itineraries") from e
        finally:
            conn.close()

    def save(self, user_id: str, itinerary: Itinerary) -> SavedItinerary:
        """
        Insert a new snapshot. Saving the same itinerary twice creates two
        records; there is no deduplication key.
        """
        record_id = str(uuid.uuid4())
        created_at = datetime.now(timezone.utc)
        fields = itinerary.preference_fields()

        conn = self._get_connection()
        try:
            with conn:
                conn.execute(
                    """
                    INSERT INTO itineraries (
                        id, user_id, destination, duration, budget, interests,
                        travel_style, pace, food_preferences, itinerary_data,
                        generated_at, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record_id,
                        user_id,
                        fields["destination"],
                        fields["duration"],
                        fields["budget"],
                        json.dumps(fields["interests"], ensure_ascii=False),
                        fields["travelStyle"],
                        fields["pace"],
                        json.dumps(fields["foodPreferences"], ensure_ascii=False),
                        json.dumps(itinerary.days_as_json(), ensure_ascii=False),
                        itinerary.generated_at.isoformat(),
                        created_at.isoformat(),
                    ),
                )
        except sqlite3.Error as e:
            logger.error(f"Error saving itinerary for user {user_id}: {e}")
            raise PersistenceError() from e
        finally:
            conn.close()

        logger.info(f"Saved itinerary {record_id} ({itinerary.destination}) for user {user_id}")
        return SavedItinerary(
            id=record_id,
            user_id=user_id,
            created_at=created_at,
            itinerary=itinerary,
        )

    def list_for_user(self, user_id: str) -> List[SavedItinerary]:
        """All snapshots of a user, newest first."""
        rows = self._query_db(
            "SELECT * FROM itineraries WHERE user_id = ? ORDER BY created_at DESC",
            (user_id,),
        )
        return [self._from_row(row) for row in rows]

    def get(self, user_id: str, record_id: str) -> Optional[SavedItinerary]:
        rows = self._query_db(
            "SELECT * FROM itineraries WHERE id = ? AND user_id = ?",
            (record_id, user_id),
        )
        return self._from_row(rows[0]) if rows else None

    def delete(self, user_id: str, record_id: str) -> bool:
        """Delete a snapshot. Returns False when the user has no such record."""
        conn = self._get_connection()
        try:
            with conn:
                cursor = conn.execute(
                    "DELETE FROM itineraries WHERE id = ? AND user_id = ?",
                    (record_id, user_id),
                )
            return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Error deleting itinerary {record_id}: {e}")
            raise PersistenceError("Failed to delete itinerary") from e
        finally:
            conn.close()

    def _from_row(self, row: Dict) -> SavedItinerary:
        itinerary = Itinerary(
            destination=row["destination"],
            duration=row["duration"],
            budget=row["budget"],
            interests=json.loads(row["interests"]),
            travel_style=row["travel_style"],
            pace=row["pace"],
            food_preferences=json.loads(row["food_preferences"]),
            days=json.loads(row["itinerary_data"]),
            generated_at=row["generated_at"],
        )
        return SavedItinerary(
            id=row["id"],
            user_id=row["user_id"],
            created_at=row["created_at"],
            itinerary=itinerary,
        )


# Global repository instance
repository: Optional[ItineraryRepository] = None


def get_repository() -> ItineraryRepository:
    """Get or create the global repository."""
    global repository
    if repository is None:
        repository = ItineraryRepository()
    return repository
