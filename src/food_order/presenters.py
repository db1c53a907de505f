"""
Presentation layer.

The orchestrator reports progress through a ``Presenter``: free-text status
messages, the tracker flags, the receipt, and the catalog entry found by a
search. Rendering is up to the implementation.
"""

import logging
import sys
from typing import Protocol, TextIO

from food_order.domain.models import CatalogEntry, Receipt, Stage, StageStatus, TrackerSnapshot

logger = logging.getLogger(__name__)

_MARKS = {StageStatus.PENDING: "·", StageStatus.DONE: "✓", StageStatus.FAILED: "✗"}


class Presenter(Protocol):
    def show_status(self, text: str) -> None: ...

    def show_tracker(self, tracker: TrackerSnapshot) -> None: ...

    def show_receipt(self, receipt: Receipt) -> None: ...

    def show_catalog(self, entry: CatalogEntry) -> None: ...


def format_tracker(tracker: TrackerSnapshot) -> str:
    return "  ".join(f"{_MARKS[tracker.status_of(stage)]} {stage.value}" for stage in Stage)


def format_money(amount: float) -> str:
    return f"${amount:g}"


def format_menu(entry: CatalogEntry) -> str:
    return "\n".join(f"{item.item} - {format_money(item.price)}" for item in entry.items)


class LoggingPresenter:
    """Sends everything to the module logger."""

    def show_status(self, text: str) -> None:
        logger.info(text)

    def show_tracker(self, tracker: TrackerSnapshot) -> None:
        logger.info("Tracker: %s", format_tracker(tracker))

    def show_receipt(self, receipt: Receipt) -> None:
        logger.info("Receipt: %s", receipt.model_dump_json(by_alias=True, exclude_none=True))

    def show_catalog(self, entry: CatalogEntry) -> None:
        logger.info("Menu of %s: %s", entry.name, "; ".join(format_menu(entry).splitlines()))


class ConsolePresenter:
    """Writes a human-readable progress log to a stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def show_status(self, text: str) -> None:
        print(text, file=self.stream)

    def show_tracker(self, tracker: TrackerSnapshot) -> None:
        print(f"[{format_tracker(tracker)}]", file=self.stream)

    def show_receipt(self, receipt: Receipt) -> None:
        print(receipt.model_dump_json(indent=2, by_alias=True, exclude_none=True), file=self.stream)

    def show_catalog(self, entry: CatalogEntry) -> None:
        print(entry.name, file=self.stream)
        print(format_menu(entry), file=self.stream)
