# backend/devicepay/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/devicepay.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///devicepay.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Key of the single serialized state record
    SNAPSHOT_KEY = os.environ.get("DEVICEPAY_SNAPSHOT_KEY", "nextgen_device_manager_v1")

    # Create the snapshot table at startup instead of requiring `flask db upgrade`
    AUTO_CREATE_TABLES = os.environ.get("DEVICEPAY_AUTO_CREATE_TABLES", "true").lower() == "true"

    NOTIFICATION_TTL_SECONDS = float(os.environ.get("DEVICEPAY_NOTIFICATION_TTL", "3"))
    LOW_STOCK_THRESHOLD = int(os.environ.get("DEVICEPAY_LOW_STOCK_THRESHOLD", "5"))

    # Timezone used when rendering calendar dates (CSV export)
    DISPLAY_TIMEZONE = os.environ.get("DEVICEPAY_DISPLAY_TIMEZONE", "UTC")

    LOG_LEVEL = os.environ.get("DEVICEPAY_LOG_LEVEL", "INFO")
