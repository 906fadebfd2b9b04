"""Crypto module: passphrase cipher and text encodings used before encryption."""
from .encoding import DataUrlEncoder
from .passphrase import PassphraseCipher

__all__ = [
    'DataUrlEncoder',
    'PassphraseCipher',
]
