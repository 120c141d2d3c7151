"""
Error types for sealchain.
"""

from pathlib import Path
from typing import Optional, Union


class InvalidNameError(ValueError):
    """Raised when a keypair name does not follow naming rules."""


class EmptyNameError(InvalidNameError):
    """Name has zero length."""

    def __init__(self) -> None:
        super().__init__("name cannot be empty")


class BadCharError(InvalidNameError):
    """Name contains a character outside [A-Za-z0-9-_.]."""

    def __init__(self, char: str) -> None:
        self.char = char
        super().__init__(f'invalid character "{char}"')


class KeyFileError(Exception):
    """Raised when a key file cannot be read, written or parsed."""

    def __init__(self, path: Union[str, Path], error: Exception) -> None:
        self.path = Path(path)
        self.error = error
        super().__init__(f'unable to access key file "{self.path}": {error}')


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""


class KeychainError(Exception):
    """Base error for keychain operations."""


class BadKeychainDir(KeychainError):
    """Keychain directory cannot be listed."""

    def __init__(self, path: Union[str, Path], error: Exception) -> None:
        self.path = Path(path)
        self.error = error
        super().__init__(self._message())

    def _message(self) -> str:
        return f'keychain path "{self.path}" is invalid: {self.error}'


class KeychainOpenError(BadKeychainDir):
    """Keychain directory cannot be created."""

    def _message(self) -> str:
        return f'unable to access keychain directory "{self.path}": {self.error}'


class InvalidKeypairName(KeychainError):
    """A raw name failed validation."""

    def __init__(self, name: str, error: InvalidNameError) -> None:
        self.name = name
        self.error = error
        super().__init__(f'keypair name "{name}" is invalid: {error}')


class KeypairNotFound(KeychainError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'keypair "{name}" not found')


class KeypairAlreadyExists(KeychainError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'keypair "{name}" already exists')


class PublicKeyNotFound(KeychainError):
    def __init__(self) -> None:
        super().__init__("no matching keypair found for public key")


class LoadError(KeychainError):
    def __init__(self, name: str, error: Exception) -> None:
        self.name = name
        self.error = error
        super().__init__(f'error loading key "{name}": {error}')


class SaveError(KeychainError):
    def __init__(self, name: str, error: Exception) -> None:
        self.name = name
        self.error = error
        super().__init__(f'error saving key "{name}": {error}')


class DeleteError(KeychainError):
    def __init__(self, name: str, error: Exception) -> None:
        self.name = name
        self.error = error
        super().__init__(f'error deleting key "{name}": {error}')


class RenameIncomplete(KeychainError):
    """
    Rename wrote the new keypair but could not remove the old one.

    Both names now hold the same key material; removing ``old_name``
    by hand completes the rename.
    """

    def __init__(self, old_name: str, new_name: str, error: Optional[Exception]) -> None:
        self.old_name = old_name
        self.new_name = new_name
        self.error = error
        super().__init__(
            f'keypair "{old_name}" was copied to "{new_name}" but could not be '
            f'removed, both names now exist: {error}'
        )
