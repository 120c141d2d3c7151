"""
X25519 key material and key file serialization for sealchain.
"""

import os
from pathlib import Path
from typing import Optional, Tuple, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import (
    X25519PrivateKey,
    X25519PublicKey,
)

from ..errors import KeyFileError

PathLike = Union[str, Path]

# Errors raised by file access and PEM parsing
_KEY_FILE_ERRORS = (OSError, ValueError, TypeError, UnsupportedAlgorithm)


def _write_key_file(
    path: PathLike, data: bytes, exclusive: bool, mode: Optional[int] = None
) -> None:
    flags = os.O_WRONLY | os.O_CREAT | (os.O_EXCL if exclusive else os.O_TRUNC)
    fd = os.open(path, flags, 0o666 if mode is None else mode)
    with os.fdopen(fd, "wb") as f:
        if mode is not None:
            # A replaced file keeps its old mode until this chmod
            os.chmod(path, mode)
        f.write(data)


class PublicKey:
    """X25519 public key, used to encrypt data for the key's owner."""

    def __init__(self, public_key: X25519PublicKey):
        self.public_key = public_key

    @classmethod
    def from_bytes(cls, public_bytes: bytes) -> "PublicKey":
        """Load public key from raw bytes."""
        return cls(X25519PublicKey.from_public_bytes(public_bytes))

    @classmethod
    def from_hex(cls, hex_string: str) -> "PublicKey":
        """Load public key from hexadecimal string."""
        return cls.from_bytes(bytes.fromhex(hex_string))

    @classmethod
    def from_pem(cls, pem_data: bytes) -> "PublicKey":
        """Load public key from PEM (SubjectPublicKeyInfo)."""
        public_key = serialization.load_pem_public_key(pem_data)
        if not isinstance(public_key, X25519PublicKey):
            raise ValueError("Key is not an X25519 public key")
        return cls(public_key)

    @classmethod
    def from_file(cls, path: PathLike) -> "PublicKey":
        """
        Load public key from a PEM file.

        Raises:
            KeyFileError: If the file is unreadable or not an X25519 public key
        """
        try:
            with open(path, "rb") as f:
                return cls.from_pem(f.read())
        except _KEY_FILE_ERRORS as e:
            raise KeyFileError(path, e) from e

    def to_bytes(self) -> bytes:
        """Export public key as raw bytes."""
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def to_hex(self) -> str:
        """Export public key as hexadecimal string."""
        return self.to_bytes().hex()

    def to_pem(self) -> bytes:
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def to_file(self, path: PathLike, exclusive: bool = False) -> None:
        """
        Write public key to a PEM file.

        Args:
            path: Destination file
            exclusive: Fail instead of replacing an existing file

        Raises:
            KeyFileError: If the file cannot be written
        """
        try:
            _write_key_file(path, self.to_pem(), exclusive)
        except OSError as e:
            raise KeyFileError(path, e) from e

    def copy(self) -> "PublicKey":
        return PublicKey(self.public_key)

    def __eq__(self, other: object) -> bool:
        """Check equality based on public key bytes."""
        if not isinstance(other, PublicKey):
            return False
        return self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"PublicKey({self.to_hex()})"


class SecretKey:
    """X25519 secret key, used to decrypt data sent to the matching public key."""

    def __init__(self, private_key: X25519PrivateKey):
        self.private_key = private_key

    @classmethod
    def generate(cls) -> "SecretKey":
        return cls(X25519PrivateKey.generate())

    @classmethod
    def from_bytes(cls, private_bytes: bytes) -> "SecretKey":
        """Load secret key from raw private key bytes."""
        return cls(X25519PrivateKey.from_private_bytes(private_bytes))

    @classmethod
    def from_pem(cls, pem_data: bytes) -> "SecretKey":
        """Load secret key from unencrypted PEM (PKCS8)."""
        private_key = serialization.load_pem_private_key(pem_data, password=None)
        if not isinstance(private_key, X25519PrivateKey):
            raise ValueError("Key is not an X25519 private key")
        return cls(private_key)

    @classmethod
    def from_file(cls, path: PathLike) -> "SecretKey":
        """
        Load secret key from a PEM file.

        Raises:
            KeyFileError: If the file is unreadable or not an X25519 private key
        """
        try:
            with open(path, "rb") as f:
                return cls.from_pem(f.read())
        except _KEY_FILE_ERRORS as e:
            raise KeyFileError(path, e) from e

    def public_key(self) -> PublicKey:
        """Derive the matching public key."""
        return PublicKey(self.private_key.public_key())

    def to_bytes(self) -> bytes:
        """Export secret key as raw bytes."""
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def to_pem(self) -> bytes:
        return self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )

    def to_file(self, path: PathLike, exclusive: bool = False) -> None:
        """
        Write secret key to a PEM file readable only by the owner.

        Args:
            path: Destination file
            exclusive: Fail instead of replacing an existing file

        Raises:
            KeyFileError: If the file cannot be written
        """
        try:
            _write_key_file(path, self.to_pem(), exclusive, mode=0o600)
        except OSError as e:
            raise KeyFileError(path, e) from e

    def copy(self) -> "SecretKey":
        return SecretKey(self.private_key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecretKey):
            return False
        return self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        # Never print secret material
        return f"SecretKey(public={self.public_key().to_hex()})"


def generate_keypair() -> Tuple[PublicKey, SecretKey]:
    """Generate a fresh X25519 public/secret key pair."""
    secret = SecretKey.generate()
    return secret.public_key(), secret
