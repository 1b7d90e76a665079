"""Password hashing using bcrypt.

Uses the ``bcrypt`` library directly (>=4.0). Only the hash is stored; it is
never part of a cached payload or a GraphQL type.
"""

import bcrypt


def hash_password(plain: str) -> str:
    """Hash a plain-text password with bcrypt. Returns a utf-8 hash string."""
    hashed_bytes: bytes = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt())
    return hashed_bytes.decode("utf-8")
