"""PBKDF2 password hashing."""

import base64
import hashlib
import hmac
import os
from dataclasses import dataclass

from fitness_journal.services.users import PasswordHasher

_SCHEME_PREFIX = "pbkdf2_"


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


@dataclass
class Pbkdf2PasswordHasher(PasswordHasher):
    """Encodes hashes as ``pbkdf2_<alg>$<iterations>$<salt>$<digest>``."""

    algorithm: str = "sha256"
    iterations: int = 200_000

    def hash(self, password: str) -> str:
        salt = os.urandom(16)
        digest = hashlib.pbkdf2_hmac(
            self.algorithm, password.encode("utf-8"), salt, self.iterations
        )
        return (
            f"{_SCHEME_PREFIX}{self.algorithm}${self.iterations}"
            f"${_b64encode(salt)}${_b64encode(digest)}"
        )

    def verify(self, password: str, hashed: str) -> bool:
        try:
            scheme, iterations, salt, expected = hashed.split("$", 3)
        except ValueError:
            return False
        if not scheme.startswith(_SCHEME_PREFIX) or not iterations.isdigit():
            return False
        try:
            actual = hashlib.pbkdf2_hmac(
                scheme.removeprefix(_SCHEME_PREFIX),
                password.encode("utf-8"),
                _b64decode(salt),
                int(iterations),
            )
            return hmac.compare_digest(actual, _b64decode(expected))
        except ValueError:
            return False
