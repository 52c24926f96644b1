# Overview: Service-layer helpers for generated identifiers (product ids, transaction and shrinkage codes).

"""
Identifier Service

Transaction and shrinkage ids only need to be unique within a session. They
are short fixed-prefix codes (e.g. TXN-7K2QZ9A) so they stay readable in the
history views; product ids are uuid4 strings.
"""

import secrets
import string
import uuid


SALE_PREFIX = "TXN"
SHRINKAGE_PREFIX = "DMG"
CODE_LENGTH = 7
CODE_ALPHABET = string.ascii_uppercase + string.digits


def new_product_id() -> str:
    return str(uuid.uuid4())


def new_reference(prefix: str, existing: set[str] | None = None) -> str:
    """Random '<PREFIX>-XXXXXXX' code, redrawn on collision with `existing`."""
    while True:
        code = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
        reference = f"{prefix}-{code}"
        if not existing or reference not in existing:
            return reference
