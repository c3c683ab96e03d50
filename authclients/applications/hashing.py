"""
authclients.applications.hashing
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Client secrets are never stored in plain text. They are obfuscated with
a salted, iterated one-way hash when written, and verified against that
hash when a client authenticates.
"""

import asyncio
import base64
import logging
import os
from typing import Protocol

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from authclients.common.security import constant_time_equals
from .errors import PreconditionError

log = logging.getLogger(__name__)


class SecretHasher(Protocol):
    def hash(self, secret: str) -> str:
        """
        Compute the representation of a secret which is saved by the store
        :param secret: the plain text secret
        :return: the obfuscated secret
        """
        ...

    def verify(self, hashed: str, secret: str) -> bool:
        """
        Check a plain text secret against a stored representation. It MAY
        raise when the stored representation is malformed.
        :param hashed: the stored representation
        :param secret: the plain text secret
        :return: if the secret matches
        """
        ...


class PBKDF2SecretHasher(SecretHasher):
    """A default implementation of a SecretHasher using PBKDF2-HMAC.

    Hashes are serialized as ``pbkdf2_sha256$<iterations>$<salt>$<key>``,
    salt and key being base64 encoded. The iteration count is read back
    from the stored value, so raising ``DEFAULT_ITERATIONS`` does not
    invalidate secrets hashed before.

    Developers MAY change the work factor with::

        class SecretHasher(PBKDF2SecretHasher):
            DEFAULT_ITERATIONS = 1_000_000
    """
    ALGORITHM = "pbkdf2_sha256"
    DEFAULT_ITERATIONS = 600_000
    #: stored hashes asking for more work are rejected as malformed
    MAX_ITERATIONS = 10 * DEFAULT_ITERATIONS
    SALT_LENGTH = 16
    KEY_LENGTH = 32

    def __init__(self, iterations: int = None):
        self.iterations = iterations or self.DEFAULT_ITERATIONS
        if self.iterations > self.MAX_ITERATIONS:
            raise ValueError(f"Iteration count cannot exceed {self.MAX_ITERATIONS}")

    def _derive(self, secret: str, salt: bytes, iterations: int, length: int) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=length,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(secret.encode("utf-8"))

    def hash(self, secret: str) -> str:
        salt = os.urandom(self.SALT_LENGTH)
        key = self._derive(secret, salt, self.iterations, self.KEY_LENGTH)
        return "$".join([
            self.ALGORITHM,
            str(self.iterations),
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(key).decode("ascii"),
        ])

    def verify(self, hashed: str, secret: str) -> bool:
        algorithm, iterations, salt, key = hashed.split("$")
        if algorithm != self.ALGORITHM:
            raise ValueError(f"Unsupported hash algorithm '{algorithm}'")

        iterations = int(iterations)
        if iterations < 1 or iterations > self.MAX_ITERATIONS:
            raise ValueError("Invalid iteration count")

        salt = base64.b64decode(salt, validate=True)
        expected = base64.b64decode(key, validate=True)
        if not salt or not expected:
            raise ValueError("Malformed hash")

        actual = self._derive(secret, salt, iterations, len(expected))
        return constant_time_equals(actual, expected)


class SecretCodec:
    """Obfuscate and verify client secrets with a :class:`SecretHasher`.

    Hashing is CPU bound, it runs in a worker thread to keep the event
    loop responsive.

    :param hasher: the hashing primitive, defaults to :class:`PBKDF2SecretHasher`
    :param logger: receives the warning emitted for a malformed hash
    """

    def __init__(self, hasher: SecretHasher = None, logger: logging.Logger = None):
        self.hasher = hasher or PBKDF2SecretHasher()
        self.logger = logger or log

    async def obfuscate(self, secret: str) -> str:
        if not secret:
            raise PreconditionError("The secret cannot be null or empty.", "secret")
        return await asyncio.to_thread(self.hasher.hash, secret)

    async def verify(self, secret: str, hashed: str) -> bool:
        """Compare a plain text secret with the stored representation.

        A malformed or corrupted representation is reported as ``False``.
        """
        if not secret:
            raise PreconditionError("The secret cannot be null or empty.", "secret")
        if not hashed:
            raise PreconditionError("The comparand cannot be null or empty.", "hashed")

        try:
            return await asyncio.to_thread(self.hasher.verify, hashed, secret)
        except Exception:
            self.logger.warning(
                "An error occurred while trying to verify a client secret. "
                "This may indicate that the hashed entry is corrupted or malformed.",
                exc_info=True,
            )
            return False
