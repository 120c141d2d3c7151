"""
Iteration over keypairs stored in a keychain directory.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Set, Union

from ..errors import BadKeychainDir, KeychainError
from .keypair import Keypair

logger = logging.getLogger(__name__)

KEY_SUFFIXES = (".pub", ".sec")


class KeychainIterator:
    """
    Lazy iterator over keypairs available in a keychain directory.

    Candidate names are collected once, when the iterator is created, from
    every ``.pub`` or ``.sec`` entry. Each name is then loaded on demand and
    skipped if it does not load as a complete pair. Order is unspecified.
    The iterator is single-use.
    """

    def __init__(self, directory: Union[str, Path]):
        """
        Args:
            directory: Keychain directory to scan

        Raises:
            BadKeychainDir: If the directory cannot be listed
        """
        self.directory = Path(directory)
        try:
            names = self._candidate_names(self.directory)
        except OSError as e:
            raise BadKeychainDir(self.directory, e) from e
        self._names: Iterator[str] = iter(names)

    @staticmethod
    def _candidate_names(directory: Path) -> Set[str]:
        names = set()
        with os.scandir(directory) as entries:
            for entry in entries:
                path = Path(entry.name)
                if path.suffix in KEY_SUFFIXES:
                    names.add(path.stem)
        return names

    def __iter__(self) -> "KeychainIterator":
        return self

    def __next__(self) -> Keypair:
        for name in self._names:
            try:
                return Keypair.load(self.directory, name)
            except KeychainError as e:
                logger.debug(f"Skipping keypair {name!r}: {e}")
        raise StopIteration
