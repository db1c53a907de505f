"""
Catalog lookup: restaurant name → menu.

The store itself is an external collaborator; ``CatalogStore`` is the only
thing the stage needs from it (case-insensitive, whole-string name match).
``InMemoryCatalogStore`` is the demo store, seeded with sample restaurants
when empty or loaded from a YAML file.
"""

import logging
from pathlib import Path
from typing import Iterable, Protocol

import yaml

from food_order.domain.errors import InvalidInputError, NotFoundError
from food_order.domain.models import CatalogEntry, MenuItem, Stage
from food_order.services.latency import LatencySimulator

logger = logging.getLogger(__name__)

SAMPLE_CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry(
        name="Burger Palace",
        items=(
            MenuItem(item="Cheese Burger", price=5),
            MenuItem(item="Veg Burger", price=4),
            MenuItem(item="Fries", price=2),
        ),
    ),
    CatalogEntry(
        name="Pasta Hub",
        items=(
            MenuItem(item="Alfredo Pasta", price=7),
            MenuItem(item="Pesto Pasta", price=8),
        ),
    ),
)


class CatalogStore(Protocol):
    """Read-only catalog access used by the search and order stages."""

    def find_by_name(self, name: str) -> CatalogEntry | None: ...


class InMemoryCatalogStore:
    """Dict-backed catalog keyed by lower-cased restaurant name."""

    def __init__(self, entries: Iterable[CatalogEntry] = ()) -> None:
        self._entries: dict[str, CatalogEntry] = {}
        for entry in entries:
            self.add(entry)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: CatalogEntry) -> None:
        key = entry.name.strip().lower()
        if key in self._entries:
            raise ValueError(f"Duplicate restaurant name: {entry.name!r}")
        self._entries[key] = entry

    def find_by_name(self, name: str) -> CatalogEntry | None:
        return self._entries.get(name.strip().lower())

    def seed(self, entries: Iterable[CatalogEntry] = SAMPLE_CATALOG) -> None:
        """Populate the store with sample data if it is empty."""
        if self._entries:
            return
        for entry in entries:
            self.add(entry)
        logger.info("Seeded %d sample restaurants", len(self._entries))

    @classmethod
    def from_yaml(cls, path: str | Path) -> "InMemoryCatalogStore":
        """Load ``restaurants: [{name, items: [{item, price}]}]`` from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        store = cls(CatalogEntry.model_validate(raw) for raw in data.get("restaurants", []))
        logger.info("Loaded %d restaurants from %s", len(store), path)
        return store


class CatalogService:
    """The search stage."""

    def __init__(self, store: CatalogStore, latency: LatencySimulator) -> None:
        self.store = store
        self.latency = latency

    def lookup(self, name: str | None) -> CatalogEntry:
        """Resolve a restaurant without simulated latency (used by the order stage)."""
        name = (name or "").strip()
        if not name:
            raise InvalidInputError("Restaurant name required.")
        entry = self.store.find_by_name(name)
        if entry is None:
            raise NotFoundError("Restaurant not found.")
        return entry

    async def find_catalog(self, name: str | None) -> CatalogEntry:
        await self.latency.simulate(Stage.SEARCH)
        logger.info("Searching catalog for %r", name)
        entry = self.lookup(name)
        logger.info("Found %s with %d items", entry.name, len(entry.items))
        return entry
