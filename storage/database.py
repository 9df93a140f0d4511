"""SQLite storage for story worlds, stories and extracted entities."""
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from utils.logger import setup_logger
import config

logger = setup_logger(__name__)

ENTITY_TABLES = (
    "characters", "locations", "items", "events", "scenes", "plotlines",
    "character_relationships", "event_dependencies", "character_arcs",
)
LINK_TABLES = (
    "scene_characters", "character_events", "event_locations",
    "plotline_events", "plotline_characters", "arc_events",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Database:
    """Manages SQLite database operations."""

    def __init__(self, db_path: Path = config.DB_PATH):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self._initialize_schema()

    def _initialize_schema(self):
        """Create tables if they don't exist."""
        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, 'r') as f:
            schema_sql = f.read()

        with self._get_connection() as conn:
            conn.executescript(schema_sql)
            conn.commit()

        logger.debug(f"Database initialized at {self.db_path}")

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    # ------------------------------------------------------------ worlds and stories

    def create_story_world(self, name: str, description: str = "") -> str:
        """Insert a new story world.

        Args:
            name: Story world name
            description: Optional description

        Returns:
            Story world UUID
        """
        world_id = str(uuid.uuid4())
        with self._get_connection() as conn:
            conn.execute(
                "INSERT INTO story_worlds (id, name, description, created_at) VALUES (?, ?, ?, ?)",
                (world_id, name, description, _now())
            )
            conn.commit()

        logger.info(f"Created story world: {name} (ID: {world_id})")
        return world_id

    def get_story_world(self, world_id: str) -> Optional[Dict[str, Any]]:
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM story_worlds WHERE id = ?", (world_id,)).fetchone()
            return dict(row) if row else None

    def list_story_worlds(self) -> List[Dict[str, Any]]:
        with self._get_connection() as conn:
            rows = conn.execute("SELECT * FROM story_worlds ORDER BY created_at").fetchall()
            return [dict(row) for row in rows]

    def insert_story(
        self,
        title: str,
        story_world_id: Optional[str] = None,
        source_path: Optional[str] = None,
        source_format: Optional[str] = None,
        word_count: Optional[int] = None
    ) -> str:
        """Insert a new story record.

        Args:
            title: Story title
            story_world_id: Owning story world, if any
            source_path: File the story was loaded from
            source_format: txt | md | fountain | pdf
            word_count: Word count

        Returns:
            Story UUID
        """
        story_id = str(uuid.uuid4())
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO stories (id, story_world_id, title, source_path, source_format, word_count, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (story_id, story_world_id, title, source_path, source_format, word_count, _now())
            )
            conn.commit()

        logger.info(f"Inserted story: {title} (ID: {story_id})")
        return story_id

    def get_story(self, story_id: str) -> Optional[Dict[str, Any]]:
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM stories WHERE id = ?", (story_id,)).fetchone()
            return dict(row) if row else None

    def list_stories(self, story_world_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """List stories, optionally limited to one story world."""
        with self._get_connection() as conn:
            if story_world_id:
                rows = conn.execute(
                    "SELECT * FROM stories WHERE story_world_id = ? ORDER BY created_at",
                    (story_world_id,)
                ).fetchall()
            else:
                rows = conn.execute("SELECT * FROM stories ORDER BY created_at").fetchall()
            return [dict(row) for row in rows]

    def update_story_analysis(self, story_id: str, synopsis: str, detected_format: str) -> None:
        """Record the synopsis and detected format of an analyzed story."""
        with self._get_connection() as conn:
            conn.execute(
                "UPDATE stories SET synopsis = ?, detected_format = ?, analyzed_at = ? WHERE id = ?",
                (synopsis, detected_format, _now(), story_id)
            )
            conn.commit()

    # ------------------------------------------------------------ entities

    def find_character_id(self, name: str, story_world_id: Optional[str] = None) -> Optional[str]:
        """Case-insensitive character lookup, scoped to a story world when given.

        Args:
            name: Character name
            story_world_id: Story world to search; all characters when None

        Returns:
            ID of the first matching character, or None
        """
        with self._get_connection() as conn:
            if story_world_id:
                row = conn.execute(
                    "SELECT id FROM characters WHERE LOWER(name) = LOWER(?) AND story_world_id = ? LIMIT 1",
                    (name, story_world_id)
                ).fetchone()
            else:
                row = conn.execute(
                    "SELECT id FROM characters WHERE LOWER(name) = LOWER(?) LIMIT 1",
                    (name,)
                ).fetchone()
            return row["id"] if row else None

    def character_exists(self, name: str, story_world_id: Optional[str] = None) -> bool:
        return self.find_character_id(name, story_world_id) is not None

    def insert_entity(self, table: str, values: Dict[str, Any]) -> str:
        """Insert one row into an entity table.

        Args:
            table: One of ENTITY_TABLES
            values: Column values (without ``id``)

        Returns:
            Generated row UUID

        Raises:
            ValueError: If the table is not an entity table
            sqlite3.Error: If the insert fails
        """
        if table not in ENTITY_TABLES:
            raise ValueError(f"Unknown entity table: {table}")

        row = {"id": str(uuid.uuid4()), **values}
        if table not in ("character_relationships", "event_dependencies", "character_arcs"):
            row.setdefault("created_at", _now())

        columns = ', '.join(row)
        placeholders = ', '.join(f":{column}" for column in row)
        with self._get_connection() as conn:
            conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", row)
            conn.commit()
        return row["id"]

    def link(self, table: str, values: Dict[str, Any]) -> None:
        """Insert a cross-reference row, ignoring duplicates.

        Raises:
            ValueError: If the table is not a link table
            sqlite3.Error: If the insert fails
        """
        if table not in LINK_TABLES:
            raise ValueError(f"Unknown link table: {table}")

        columns = ', '.join(values)
        placeholders = ', '.join(f":{column}" for column in values)
        with self._get_connection() as conn:
            conn.execute(f"INSERT OR IGNORE INTO {table} ({columns}) VALUES ({placeholders})", values)
            conn.commit()

    def get_entities(self, table: str, story_id: str) -> List[Dict[str, Any]]:
        """All rows of an entity table that belong to a story."""
        if table not in ENTITY_TABLES:
            raise ValueError(f"Unknown entity table: {table}")

        with self._get_connection() as conn:
            if table == "event_dependencies":
                rows = conn.execute(
                    """
                    SELECT d.* FROM event_dependencies d
                    JOIN events e ON e.id = d.predecessor_event_id
                    WHERE e.story_id = ?
                    """,
                    (story_id,)
                ).fetchall()
            else:
                order = " ORDER BY sequence_number" if table in ("events", "scenes") else ""
                rows = conn.execute(f"SELECT * FROM {table} WHERE story_id = ?{order}", (story_id,)).fetchall()
            return [dict(row) for row in rows]

    def count_links(self, table: str) -> int:
        if table not in LINK_TABLES:
            raise ValueError(f"Unknown link table: {table}")
        with self._get_connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    def get_story_counts(self, story_id: str) -> Dict[str, int]:
        """Number of stored entities per table for a story."""
        return {table: len(self.get_entities(table, story_id)) for table in ENTITY_TABLES}
