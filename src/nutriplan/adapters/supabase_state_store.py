"""Supabase-backed key-value state store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutriplan.services.storage import StateStore


@dataclass
class SupabaseStateStore(StateStore):
    """Supabase implementation storing JSON values in ``app_state``."""

    client: Client
    table_name: str = "app_state"

    def load(self, key: str) -> object | None:
        """Return the stored JSON value for a key."""
        response = (
            self.client.table(self.table_name)
            .select("value_json")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value_json")

    def save(self, key: str, value: object) -> None:
        """Insert or replace the value for a key."""
        self.client.table(self.table_name).upsert(
            {
                "key": key,
                "value_json": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()

    def delete(self, key: str) -> None:
        """Delete the row for a key."""
        self.client.table(self.table_name).delete().eq("key", key).execute()
