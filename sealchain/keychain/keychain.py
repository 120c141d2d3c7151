"""
Directory-backed registry of named keypairs.
"""

import logging
from pathlib import Path
from typing import List, Union

from ..config import default_keychain_dir
from ..crypto.keys import PublicKey, SecretKey
from ..errors import KeychainError, KeychainOpenError, PublicKeyNotFound, RenameIncomplete
from .iterator import KeychainIterator
from .keypair import Keypair, parse_keypair_name

logger = logging.getLogger(__name__)


class Keychain:
    """
    Accessor to a keychain directory.

    The directory is the only source of truth: nothing is cached, every
    call reads the filesystem again. No locking is done against other
    processes using the same directory.
    """

    def __init__(self, key_dir: Union[str, Path]):
        self.key_dir = Path(key_dir)

    @classmethod
    def open(cls) -> "Keychain":
        """Open the user's default keychain, creating it if needed."""
        return cls.open_at(default_keychain_dir())

    @classmethod
    def open_at(cls, path: Union[str, Path]) -> "Keychain":
        """
        Open the keychain at ``path``, creating it and any parents if needed.

        Raises:
            KeychainOpenError: If the directory cannot be created
        """
        key_dir = Path(path)
        try:
            key_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise KeychainOpenError(key_dir, e) from e
        logger.debug(f"Opened keychain at {key_dir}")
        return cls(key_dir)

    def iter(self) -> KeychainIterator:
        """
        Create an iterator over keypairs in the keychain.

        Unreadable or incomplete keypairs are skipped silently.

        Raises:
            BadKeychainDir: If the keychain directory is not listable
        """
        return KeychainIterator(self.key_dir)

    def __iter__(self) -> KeychainIterator:
        return self.iter()

    def list(self) -> List[Keypair]:
        """Return all loadable keypairs, in no particular order."""
        return list(self.iter())

    def create(self, name: str, public: PublicKey, secret: SecretKey) -> None:
        """
        Store a new keypair under ``name``.

        Raises:
            InvalidKeypairName: If the name is invalid
            KeypairAlreadyExists: If either file for ``name`` exists
            SaveError: If a key file cannot be written
        """
        keypair = Keypair(parse_keypair_name(name), public, secret)
        keypair.save(self.key_dir)
        logger.info(f"Created keypair {name} in {self.key_dir}")

    def get(self, name: str) -> Keypair:
        """
        Get the keypair called ``name``.

        Raises:
            InvalidKeypairName: If the name is invalid
            KeypairNotFound: If the keypair is missing or incomplete
            LoadError: If a key file cannot be read
        """
        return Keypair.load(self.key_dir, name)

    def find(self, public: PublicKey) -> Keypair:
        """
        Find a keypair whose public key equals ``public``.

        If several stored keypairs share the key, whichever is seen first
        is returned.

        Raises:
            BadKeychainDir: If the keychain directory is not listable
            PublicKeyNotFound: If no keypair matches
        """
        for keypair in self.iter():
            if keypair.public == public:
                return keypair
        raise PublicKeyNotFound()

    def remove(self, name: str) -> None:
        """
        Remove the keypair called ``name``.

        Raises:
            InvalidKeypairName: If the name is invalid
            KeypairNotFound: If the keypair does not exist
            DeleteError: If a key file cannot be removed
        """
        keypair = self.get(name)
        keypair.delete(self.key_dir)
        logger.info(f"Removed keypair {name} from {self.key_dir}")

    def rename(self, old_name: str, new_name: str) -> None:
        """
        Rename ``old_name`` to ``new_name``.

        The new keypair is written before the old one is removed, so a
        failure never loses the only copy of a key. If the create step
        fails the old keypair is untouched.

        Raises:
            KeypairNotFound: If ``old_name`` does not exist
            KeypairAlreadyExists: If ``new_name`` is taken
            RenameIncomplete: If ``new_name`` was written but ``old_name``
                could not be removed
        """
        old = self.get(old_name)
        self.create(new_name, old.public.copy(), old.secret.copy())
        try:
            self.remove(old_name)
        except KeychainError as e:
            logger.warning(
                f"Rename of {old_name} to {new_name} left both keypairs in place: {e}"
            )
            raise RenameIncomplete(old_name, new_name, e) from e
        logger.info(f"Renamed keypair {old_name} to {new_name}")
