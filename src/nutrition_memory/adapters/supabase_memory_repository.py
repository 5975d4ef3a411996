"""Supabase repository for memory snapshots."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from nutrition_memory.services.memory import MemoryRepository


@dataclass
class SupabaseMemoryRepository(MemoryRepository):
    """Supabase implementation storing one snapshot row per owner."""

    client: Client
    table_name: str = "nutrition_memory"

    def load_snapshot(self, owner_key: str) -> dict[str, object] | None:
        """Return the stored snapshot for an owner, if any."""
        response = (
            self.client.table(self.table_name)
            .select("densities,phrases")
            .eq("owner_key", owner_key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return {
            "densities": row.get("densities") or {},
            "phrases": row.get("phrases") or {},
        }

    def save_snapshot(self, owner_key: str, snapshot: dict[str, object]) -> None:
        """Upsert the full snapshot for an owner."""
        response = (
            self.client.table(self.table_name)
            .upsert(
                {
                    "owner_key": owner_key,
                    "densities": snapshot.get("densities") or {},
                    "phrases": snapshot.get("phrases") or {},
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="owner_key",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save memory snapshot")
