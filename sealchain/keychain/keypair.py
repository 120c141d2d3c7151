"""
Named public/secret keypairs stored as sibling files.
"""

import logging
import stat
from pathlib import Path
from typing import Optional, Union

from ..crypto.keys import PublicKey, SecretKey
from ..errors import (
    DeleteError,
    InvalidKeypairName,
    InvalidNameError,
    KeyFileError,
    KeypairAlreadyExists,
    KeypairNotFound,
    LoadError,
    SaveError,
)
from .name import KeypairName

logger = logging.getLogger(__name__)


def is_key_file(path: Path) -> bool:
    """
    Check that ``path`` is a regular file.

    Only a missing path counts as absent; other stat failures such as
    EACCES are raised so callers can report them.
    """
    try:
        return stat.S_ISREG(path.stat().st_mode)
    except (FileNotFoundError, NotADirectoryError):
        return False


def parse_keypair_name(name: Union[str, KeypairName]) -> KeypairName:
    """
    Validate a raw name at the keychain boundary.

    Raises:
        InvalidKeypairName: If the name does not follow naming rules
    """
    if isinstance(name, KeypairName):
        return name
    try:
        return KeypairName(name)
    except InvalidNameError as e:
        raise InvalidKeypairName(name, e) from e


class Keypair:
    """Public/secret keypair with an associated name."""

    def __init__(self, name: KeypairName, public: PublicKey, secret: SecretKey):
        self._name = name
        self._public = public
        self._secret = secret

    @property
    def name(self) -> KeypairName:
        return self._name

    @property
    def public(self) -> PublicKey:
        return self._public

    @property
    def secret(self) -> SecretKey:
        return self._secret

    def public_path(self, directory: Union[str, Path]) -> Path:
        return Path(directory) / self._name.public_filename()

    def secret_path(self, directory: Union[str, Path]) -> Path:
        return Path(directory) / self._name.secret_filename()

    @classmethod
    def load(cls, directory: Union[str, Path], name: Union[str, KeypairName]) -> "Keypair":
        """
        Load the keypair called ``name`` from ``directory``.

        Both files must be present. The existence check and the reads are
        separate calls, so a file removed in between surfaces as a
        LoadError rather than KeypairNotFound.

        Raises:
            InvalidKeypairName: If the name is invalid
            KeypairNotFound: If either file is missing
            LoadError: If a key file cannot be checked, read or parsed
        """
        keypair_name = parse_keypair_name(name)
        public_path = Path(directory) / keypair_name.public_filename()
        secret_path = Path(directory) / keypair_name.secret_filename()

        try:
            present = is_key_file(public_path) and is_key_file(secret_path)
        except OSError as e:
            raise LoadError(str(keypair_name), e) from e
        if not present:
            raise KeypairNotFound(str(keypair_name))

        try:
            public = PublicKey.from_file(public_path)
            secret = SecretKey.from_file(secret_path)
        except KeyFileError as e:
            raise LoadError(str(keypair_name), e) from e

        return cls(keypair_name, public, secret)

    def save(self, directory: Union[str, Path]) -> None:
        """
        Write the keypair into ``directory``, public file first.

        Never overwrites: if either file already exists nothing is written.
        A failure writing the secret file leaves the public file behind.

        Raises:
            KeypairAlreadyExists: If either file already exists
            SaveError: If a key file cannot be checked or written
        """
        public_path = self.public_path(directory)
        secret_path = self.secret_path(directory)

        try:
            exists = is_key_file(public_path) or is_key_file(secret_path)
        except OSError as e:
            raise SaveError(str(self._name), e) from e
        if exists:
            raise KeypairAlreadyExists(str(self._name))

        try:
            self._public.to_file(public_path, exclusive=True)
            self._secret.to_file(secret_path, exclusive=True)
        except KeyFileError as e:
            raise SaveError(str(self._name), e) from e

        logger.debug(f"Saved keypair {self._name} to {directory}")

    def delete(self, directory: Union[str, Path]) -> None:
        """
        Remove whichever of the keypair's files exist.

        Missing files are not an error. Both removals are attempted; the
        first failure is reported.

        Raises:
            DeleteError: If a present file cannot be checked or removed
        """
        first_error: Optional[OSError] = None
        for path in (self.public_path(directory), self.secret_path(directory)):
            try:
                if not is_key_file(path):
                    continue
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Failed to remove {path}: {e}")
                if first_error is None:
                    first_error = e

        if first_error is not None:
            raise DeleteError(str(self._name), first_error) from first_error

        logger.debug(f"Deleted keypair {self._name} from {directory}")

    def __repr__(self) -> str:
        return f"Keypair(name={str(self._name)!r}, public={self._public.to_hex()})"
