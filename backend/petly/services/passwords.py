"""
Password hashing with bcrypt.

bcrypt is CPU-bound, so every call runs in a worker thread to keep the
event loop free for other requests.
"""

import asyncio
from functools import lru_cache

import bcrypt

from petly.config import settings

# bcrypt only reads the first 72 bytes of a password
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


def _hash_sync(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_work_factor)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


async def hash_password(password: str) -> str:
    return await asyncio.to_thread(_hash_sync, password)


async def verify_password(password: str, hashed: str) -> bool:
    """Constant-time comparison of `password` against a stored bcrypt hash."""
    return await asyncio.to_thread(bcrypt.checkpw, _encode(password), hashed.encode("utf-8"))


@lru_cache(maxsize=1)
def dummy_hash() -> str:
    """
    A real hash of a throwaway password, checked when a login names an
    unknown user so both failure paths pay for one bcrypt verification.
    """
    return _hash_sync("petly-unknown-user")
