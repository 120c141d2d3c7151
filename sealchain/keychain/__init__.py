"""Keychain storage for sealchain."""

from sealchain.keychain.iterator import KeychainIterator
from sealchain.keychain.keychain import Keychain
from sealchain.keychain.keypair import Keypair
from sealchain.keychain.name import KeypairName

__all__ = [
    "Keychain",
    "KeychainIterator",
    "Keypair",
    "KeypairName",
]
