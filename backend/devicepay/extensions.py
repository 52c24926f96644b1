# Overview: Flask extension instances for database, migrations and the process-wide ledger.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

from .ledger import Ledger

db = SQLAlchemy()
migrate = Migrate()
ledger = Ledger()
