# Overview: Flask extension that owns the process-wide ledger state, history view and notifications.

from __future__ import annotations

from flask import Flask, current_app

from .state import LedgerState
from .services.notification_service import Notifier
from .services.query_service import HistoryQuery


class Ledger:
    """
    Session wiring for the engine: one LedgerState, the history view state,
    the notification channel and the snapshot persistence observer.

    Routes and CLI commands pass `ledger.state` into the service functions.
    """

    def __init__(self, app: Flask | None = None):
        self.state = LedgerState()
        self.history = HistoryQuery()
        self.notifier = Notifier()
        self.persistence = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        from .services.persistence_service import SnapshotPersistence, SnapshotStore

        if self.persistence is not None:
            self.persistence.detach()
        self.state = LedgerState()
        self.history = HistoryQuery()
        self.notifier = Notifier(ttl_seconds=app.config["NOTIFICATION_TTL_SECONDS"])
        self.persistence = SnapshotPersistence(SnapshotStore(app.config["SNAPSHOT_KEY"]))
        app.extensions["devicepay_ledger"] = self

    def hydrate(self) -> LedgerState:
        """Load the stored snapshot (requires an app context)."""
        return self.persistence.hydrate(self.state)

    @property
    def hydrated(self) -> bool:
        return bool(self.persistence and self.persistence.hydrated)

    def notify(self, message: str) -> None:
        self.notifier.notify(message)

    def reject(self, message: str) -> None:
        self.notifier.error(message)


def get_ledger() -> Ledger:
    return current_app.extensions["devicepay_ledger"]
