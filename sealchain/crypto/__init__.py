"""Key material for sealchain."""

from sealchain.crypto.keys import PublicKey, SecretKey, generate_keypair

__all__ = [
    "PublicKey",
    "SecretKey",
    "generate_keypair",
]
