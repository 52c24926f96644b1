from __future__ import annotations

from .extensions import db
from devicepay.time_utils import to_utc_z, utcnow


class StateSnapshot(db.Model):
    """
    One serialized copy of the whole ledger state, keyed by a fixed identifier.

    Saves overwrite the row; there is no history of snapshots.
    """
    __tablename__ = "state_snapshots"

    key = db.Column(db.String(128), primary_key=True)
    payload = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "size": len(self.payload or ""),
            "updated_at": to_utc_z(self.updated_at),
        }
