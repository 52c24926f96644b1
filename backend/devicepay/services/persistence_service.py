# Overview: Service-layer snapshot persistence; loads and saves the whole ledger state as one JSON record.

"""
Snapshot Persistence

Stored shape (JSON, one row keyed by SNAPSHOT_KEY):
    {"products": [...], "sales": [...], "damages": [...]}

Loading never fails the application:
- unreadable JSON is logged and treated as an empty snapshot
- a top-level field that is not a list is logged and left empty
- a record that cannot be decoded is logged and skipped

Hydration guard: nothing is written until the initial load has completed,
so an empty startup state never clobbers stored data. After hydration every
state change rewrites the whole snapshot. Write failures are logged and
rolled back; they are never raised into the command that caused them.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from sqlalchemy.exc import SQLAlchemyError

from ..entities import DamageRecord, Product, Sale
from ..extensions import db
from ..models import StateSnapshot
from ..state import LedgerState


logger = logging.getLogger(__name__)

SNAPSHOT_FIELDS: dict[str, Callable[[dict], Any]] = {
    "products": Product.from_dict,
    "sales": Sale.from_dict,
    "damages": DamageRecord.from_dict,
}


def serialize_state(state: LedgerState) -> str:
    return json.dumps(state.to_dict(), ensure_ascii=False)


def decode_snapshot(raw: str | None) -> dict[str, list]:
    """Parse a stored payload into entity lists, tolerating malformed data."""
    decoded: dict[str, list] = {name: [] for name in SNAPSHOT_FIELDS}
    if not raw:
        return decoded

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.exception("Failed to load stored snapshot; starting empty")
        return decoded

    if not isinstance(parsed, dict):
        logger.error("Stored snapshot is %s, expected an object; starting empty", type(parsed).__name__)
        return decoded

    for name, factory in SNAPSHOT_FIELDS.items():
        if name not in parsed:
            continue
        rows = parsed[name]
        if not isinstance(rows, list):
            logger.error("Snapshot field %r is %s, expected a list; ignored", name, type(rows).__name__)
            continue
        for index, row in enumerate(rows):
            try:
                decoded[name].append(factory(row))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping malformed %s record #%d: %s", name, index, e)
    return decoded


class SnapshotStore:
    """Reads and overwrites the snapshot row through Flask-SQLAlchemy."""

    def __init__(self, key: str):
        self.key = key

    def read(self) -> str | None:
        row = db.session.get(StateSnapshot, self.key)
        return row.payload if row else None

    def write(self, payload: str) -> None:
        row = db.session.get(StateSnapshot, self.key)
        if row is None:
            row = StateSnapshot(key=self.key, payload=payload)
            db.session.add(row)
        else:
            row.payload = payload
        db.session.commit()

    def delete(self) -> bool:
        row = db.session.get(StateSnapshot, self.key)
        if row is None:
            return False
        db.session.delete(row)
        db.session.commit()
        return True


class SnapshotPersistence:
    """Observer that mirrors a LedgerState into a SnapshotStore once hydrated."""

    def __init__(self, store: SnapshotStore):
        self.store = store
        self.hydrated = False
        self._state: LedgerState | None = None

    def hydrate(self, state: LedgerState) -> LedgerState:
        """One-shot load into `state`; enables writes afterwards."""
        if self.hydrated:
            return state

        try:
            raw = self.store.read()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to read snapshot %r; starting empty", self.store.key)
            raw = None

        decoded = decode_snapshot(raw)
        state.replace(**decoded)
        self._state = state
        state.subscribe(self.on_change)
        self.hydrated = True
        logger.info(
            "Hydrated snapshot %r: %d products, %d sales, %d damages",
            self.store.key, len(state.products), len(state.sales), len(state.damages),
        )
        return state

    def on_change(self, state: LedgerState) -> None:
        if not self.hydrated:
            return
        self.save(state)

    def save(self, state: LedgerState) -> bool:
        try:
            self.store.write(serialize_state(state))
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to save snapshot %r", self.store.key)
            return False
        return True

    def detach(self) -> None:
        if self._state is not None:
            self._state.unsubscribe(self.on_change)
        self._state = None
        self.hydrated = False
