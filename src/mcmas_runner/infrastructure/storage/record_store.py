"""Thread-safe store of verifiable items and the cumulative batch log."""

import dataclasses
import threading
from typing import Dict, Iterable, List, Optional

from mcmas_runner.domain.models import ItemStatus, Verdict, VerifiableItem
from mcmas_runner.shared.logging import get_logger
from mcmas_runner.shared.types import LogListener

logger = get_logger(__name__)


class VerificationRecordStore:
    """
    Owns every VerifiableItem record and the batch log.

    All mutations happen under one lock and readers only ever receive
    copies, so status and output are always observed together. Single-item
    transitions on an id that has disappeared are silently ignored.
    """

    def __init__(self, items: Optional[Iterable[VerifiableItem]] = None):
        self._lock = threading.RLock()
        self._items: Dict[str, VerifiableItem] = {}
        self._log_chunks: List[str] = []
        self._listeners: List[LogListener] = []
        self._logger = get_logger(__name__)

        for item in items or []:
            self._items[item.item_id] = dataclasses.replace(item)

    # Reads

    def items(self) -> List[VerifiableItem]:
        """Snapshot of all records in display order."""
        with self._lock:
            return [dataclasses.replace(item) for item in self._items.values()]

    def get(self, item_id: str) -> Optional[VerifiableItem]:
        with self._lock:
            item = self._items.get(item_id)
            return dataclasses.replace(item) if item else None

    def selected(self) -> List[VerifiableItem]:
        with self._lock:
            return [dataclasses.replace(item) for item in self._items.values() if item.selected]

    @property
    def selected_count(self) -> int:
        with self._lock:
            return sum(1 for item in self._items.values() if item.selected)

    @property
    def log(self) -> str:
        with self._lock:
            return "".join(self._log_chunks)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # Catalog

    def reconcile(self, scanned: Iterable[VerifiableItem]) -> None:
        """
        Replace the collection with a fresh scan.

        Items whose name matches an existing record keep that record's id,
        selection, status and output. Names missing from the scan are dropped.
        """
        with self._lock:
            by_name = {item.name: item for item in self._items.values()}
            merged: Dict[str, VerifiableItem] = {}
            for fresh in sorted(scanned, key=lambda entry: entry.name):
                existing = by_name.get(fresh.name)
                if existing is not None:
                    item = dataclasses.replace(existing, path=fresh.path)
                else:
                    item = dataclasses.replace(fresh)
                merged[item.item_id] = item

            dropped = len(self._items) - sum(1 for key in merged if key in self._items)
            self._items = merged

        if dropped:
            self._logger.debug(f"Dropped {dropped} item(s) no longer present in the models folder")

    # Selection

    def set_selected(self, item_id: str, selected: bool) -> None:
        """Select or deselect one item. Deselecting clears its status and output."""
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                return
            item.selected = selected
            if not selected:
                item.status = ItemStatus.PENDING
                item.output = ""

    def toggle_selection(self, item_id: str) -> bool:
        """Flip one item's selection and return the new state (False if unknown)."""
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                return False
            self.set_selected(item_id, not item.selected)
            return item.selected

    def select_all(self) -> None:
        with self._lock:
            for item in self._items.values():
                item.selected = True

    def deselect_all(self) -> None:
        with self._lock:
            for item_id in self._items:
                self.set_selected(item_id, False)

    # Verification transitions

    def reset_all(self) -> None:
        """Set every item to pending with empty output, as one transition."""
        with self._lock:
            for item in self._items.values():
                item.status = ItemStatus.PENDING
                item.output = ""

    def mark_running(self, item_id: str) -> None:
        self._transition(item_id, ItemStatus.RUNNING, "")

    def mark_pending(self, item_id: str) -> None:
        self._transition(item_id, ItemStatus.PENDING, "")

    def mark_result(self, item_id: str, verdict: Verdict, output: str) -> None:
        self._transition(item_id, ItemStatus.from_verdict(verdict), output)

    def _transition(self, item_id: str, status: ItemStatus, output: str) -> None:
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                self._logger.debug(f"Ignoring {status.value} for vanished item {item_id}")
                return
            item.status = status
            item.output = output

    # Log

    def add_listener(self, listener: LogListener) -> None:
        """Register a callback receiving each appended log chunk."""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: LogListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def clear_log(self) -> None:
        with self._lock:
            self._log_chunks.clear()

    def append_log(self, text: str) -> None:
        """Append to the batch log; listeners see chunks in append order."""
        if not text:
            return
        with self._lock:
            self._log_chunks.append(text)
            for listener in list(self._listeners):
                try:
                    listener(text)
                except Exception:
                    self._logger.exception("Log listener failed")
