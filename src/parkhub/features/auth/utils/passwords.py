"""Password hashing utilities for parkhub.

Hashes use PBKDF2-HMAC-SHA256 with a random salt and are stored as
``pbkdf2_sha256$<iterations>$<salt b64>$<hash b64>``. Key derivation is
CPU-bound, so async callers go through ``hash_async``/``verify_async``,
which run it in the loop's default executor.
"""

import asyncio
import base64
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

ALGORITHM = "pbkdf2_sha256"
SALT_BYTES = 16
KEY_LENGTH = 32
DEFAULT_ITERATIONS = 390000


class PasswordHasher:
    """Hash and verify passwords."""

    def __init__(self, iterations: int = DEFAULT_ITERATIONS):
        if iterations < 1:
            raise ValueError("iterations must be >= 1")
        self.iterations = iterations

    @staticmethod
    def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
        return PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=iterations,
        )

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Password must not be empty")
        salt = os.urandom(SALT_BYTES)
        derived = self._kdf(salt, self.iterations).derive(password.encode("utf-8"))
        return "$".join((
            ALGORITHM,
            str(self.iterations),
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(derived).decode("ascii"),
        ))

    def verify(self, password: str, encoded: str) -> bool:
        """Check ``password`` against a stored hash; malformed hashes never match."""
        if not password or not encoded:
            return False
        try:
            algorithm, iterations, salt, expected = encoded.split("$")
            if algorithm != ALGORITHM:
                return False
            kdf = self._kdf(base64.b64decode(salt), int(iterations))
            kdf.verify(password.encode("utf-8"), base64.b64decode(expected))
            return True
        except (InvalidKey, ValueError):
            return False

    async def hash_async(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.hash, password)

    async def verify_async(self, password: str, encoded: str) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.verify, password, encoded)
