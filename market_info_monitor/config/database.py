"""Channel directory backed by SQLite."""

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..models.destination import ChannelAssignment


class ChannelDirectory:
    """SQLite lookup of the bot assigned to each (platform, channel) pair."""

    def __init__(self, db_path: Path):
        """Initialize channel directory.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.init_database()

    @contextmanager
    def get_connection(self):
        """Context manager for database connections.

        Yields:
            sqlite3.Connection: Database connection
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_database(self) -> None:
        """Initialize database schema."""
        with self.get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS channels (
                    platform TEXT NOT NULL,
                    channel_id TEXT NOT NULL,
                    assignee TEXT,
                    guild_id TEXT,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (platform, channel_id)
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_channels_assignee ON channels(assignee)")

    def assign_channel(
        self,
        platform: str,
        channel_id: str,
        assignee: str,
        guild_id: Optional[str] = None
    ) -> None:
        """Assign a bot to a channel, replacing any previous assignment.

        Args:
            platform: Platform identifier
            channel_id: Channel ID
            assignee: Bot identity on that platform
            guild_id: Group/guild the channel belongs to
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT OR REPLACE INTO channels
                (platform, channel_id, assignee, guild_id, updated_at)
                VALUES (?, ?, ?, ?, ?)
            """, (platform, channel_id, assignee, guild_id, datetime.now().isoformat()))

    def unassign_channel(self, platform: str, channel_id: str) -> bool:
        """Remove a channel assignment.

        Args:
            platform: Platform identifier
            channel_id: Channel ID

        Returns:
            True if an assignment was removed
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM channels WHERE platform = ? AND channel_id = ?",
                (platform, channel_id)
            )
            return cursor.rowcount > 0

    def resolve_assignee(self, platform: str, channel_id: str) -> Optional[ChannelAssignment]:
        """Look up the bot assigned to a channel.

        Args:
            platform: Platform identifier
            channel_id: Channel ID

        Returns:
            ChannelAssignment, or None if the channel is unknown or unassigned
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM channels WHERE platform = ? AND channel_id = ?",
                (platform, channel_id)
            )
            row = cursor.fetchone()

            if row and row['assignee']:
                return ChannelAssignment(
                    platform=row['platform'],
                    channel_id=row['channel_id'],
                    assignee=row['assignee'],
                    guild_id=row['guild_id']
                )
            return None

    def list_channels(self) -> List[ChannelAssignment]:
        """Get all assigned channels.

        Returns:
            List of ChannelAssignment objects
        """
        with self.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT * FROM channels
                WHERE assignee IS NOT NULL
                ORDER BY platform, channel_id
            """)

            return [
                ChannelAssignment(
                    platform=row['platform'],
                    channel_id=row['channel_id'],
                    assignee=row['assignee'],
                    guild_id=row['guild_id']
                )
                for row in cursor.fetchall()
            ]
