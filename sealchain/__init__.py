"""
sealchain - local keychain of named X25519 keypairs.
"""

__version__ = "0.1.0"
