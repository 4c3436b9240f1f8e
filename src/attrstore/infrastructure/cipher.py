"""Per-value asymmetric encryption for attribute values.

Values are encrypted with RSA-OAEP (MGF1/SHA-256) under the public key
and stored as standard base64 text, so they fit in a string attribute.
Only the holder of the private key can decrypt.

Key material is bound to one cipher instance; nothing is read from
process-wide state.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from pathlib import Path

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from attrstore.domain.errors import DecryptionFailed, EncryptionFailed, NoPrivateKey, NoPublicKey

logger = logging.getLogger(__name__)


def _oaep() -> padding.OAEP:
    return padding.OAEP(
        mgf=padding.MGF1(algorithm=hashes.SHA256()),
        algorithm=hashes.SHA256(),
        label=None,
    )


def load_public_key(path: Path) -> rsa.RSAPublicKey:
    """Load an RSA public key from a PEM certificate or public key file.

    A bundle holding a certificate wins over any bare public key in it.
    """
    data = path.read_bytes()
    try:
        key = x509.load_pem_x509_certificates(data)[0].public_key()
    except ValueError:
        try:
            key = serialization.load_pem_public_key(data)
        except ValueError as exc:
            msg = f"No certificate or public key found in {path}"
            raise ValueError(msg) from exc
    if not isinstance(key, rsa.RSAPublicKey):
        msg = f"{path} does not hold an RSA public key"
        raise ValueError(msg)
    return key


def load_private_key(path: Path, password: str | None = None) -> rsa.RSAPrivateKey:
    """Load an RSA private key from a PEM file (which may also hold a certificate)."""
    data = path.read_bytes()
    secret = password.encode("utf-8") if password else None
    try:
        key = serialization.load_pem_private_key(data, password=secret)
    except ValueError as exc:
        msg = f"Cannot load private key from {path}: {exc}"
        raise ValueError(msg) from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        msg = f"{path} does not hold an RSA private key"
        raise ValueError(msg)
    return key


@dataclass(frozen=True)
class ValueCipher:
    """Encrypts under a public key and decrypts under the matching private key.

    A cipher built from a private key alone can do both: the public half
    is derived from it.
    """

    public_key: rsa.RSAPublicKey | None = None
    private_key: rsa.RSAPrivateKey | None = None

    @classmethod
    def from_files(
        cls,
        *,
        public_cert: Path | None = None,
        private_key: Path | None = None,
        password: str | None = None,
    ) -> ValueCipher:
        """Build a cipher from PEM files. Either path may be omitted."""
        private = load_private_key(private_key, password) if private_key else None
        if public_cert is not None:
            public = load_public_key(public_cert)
        elif private is not None:
            public = private.public_key()
        else:
            public = None
        return cls(public_key=public, private_key=private)

    @property
    def can_encrypt(self) -> bool:
        return self.public_key is not None

    @property
    def can_decrypt(self) -> bool:
        return self.private_key is not None

    def encrypt(self, plaintext: str) -> str:
        """Encrypt *plaintext* and return it base64-encoded.

        Raises:
            NoPublicKey: No public key material configured.
            EncryptionFailed: Plaintext too long for the key size.
        """
        if self.public_key is None:
            raise NoPublicKey()
        try:
            ciphertext = self.public_key.encrypt(plaintext.encode("utf-8"), _oaep())
        except ValueError as exc:
            raise EncryptionFailed(f"Value cannot be encrypted: {exc}") from exc
        return base64.b64encode(ciphertext).decode("ascii")

    def decrypt(self, encoded: str) -> str:
        """Decrypt a value produced by :meth:`encrypt`.

        Raises:
            NoPrivateKey: No private key configured.
            DecryptionFailed: Not base64, wrong key, or never encrypted.
        """
        if self.private_key is None:
            raise NoPrivateKey()
        try:
            ciphertext = base64.b64decode(encoded.encode("ascii"), validate=True)
            plaintext = self.private_key.decrypt(ciphertext, _oaep())
            return plaintext.decode("utf-8")
        except (ValueError, binascii.Error, UnicodeError, UnsupportedAlgorithm) as exc:
            logger.debug("Decryption failed", exc_info=True)
            raise DecryptionFailed("Stored value is not valid ciphertext for this key") from exc
