"""bcrypt-backed secret hashing."""

from dataclasses import dataclass

import bcrypt

from mess_tracker.services.users import SecretHasher


@dataclass
class BcryptSecretHasher(SecretHasher):
    """Hashes login secrets with a per-hash salt."""

    rounds: int = 12

    def hash(self, secret: str) -> str:
        """Return the bcrypt hash of the secret."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(secret.encode("utf-8"), salt).decode("utf-8")

    def verify(self, secret: str, hashed: str) -> bool:
        """Return True when the secret matches the stored hash."""
        try:
            return bcrypt.checkpw(secret.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False
