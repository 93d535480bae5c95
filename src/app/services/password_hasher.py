import asyncio
from typing import Optional

import bcrypt

# bcrypt only consumes the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """
    One-way password hashing with bcrypt.

    The cost factor is fixed per instance so every hash in the system
    shares the same work factor. The async variants run bcrypt in a
    worker thread to keep the event loop free for other requests.

    Passwords longer than 72 UTF-8 bytes are never truncated: hashing
    them raises ValueError and verifying them fails, so two passwords
    sharing a 72-byte prefix cannot match each other.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash: Optional[bytes] = None

    def hash(self, plaintext: str) -> str:
        encoded = plaintext.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password exceeds {MAX_PASSWORD_BYTES} bytes")
        hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(self.rounds))
        return hashed.decode("utf-8")

    def verify(self, plaintext: str, hashed_value: str) -> bool:
        if not plaintext or not hashed_value:
            return False
        encoded = plaintext.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, hashed_value.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    def verify_dummy(self, plaintext: str) -> bool:
        """Burn one verification so unknown accounts take as long as known ones"""
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(self.rounds))
        candidate = (plaintext or "x").encode("utf-8")[:MAX_PASSWORD_BYTES]
        bcrypt.checkpw(candidate, self._dummy_hash)
        return False

    async def hash_async(self, plaintext: str) -> str:
        return await asyncio.to_thread(self.hash, plaintext)

    async def verify_async(self, plaintext: str, hashed_value: str) -> bool:
        return await asyncio.to_thread(self.verify, plaintext, hashed_value)

    async def verify_dummy_async(self, plaintext: str) -> bool:
        return await asyncio.to_thread(self.verify_dummy, plaintext)
