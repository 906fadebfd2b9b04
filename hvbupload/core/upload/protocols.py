"""
Protocol definitions for upload module.

Defines the capabilities the upload engine consumes: a chunking strategy,
a byte-range reader, a text cipher, a chunk encryptor and an HTTP
transport. Concrete implementations live in ``strategies`` and ``services``;
tests substitute fakes.
"""
from typing import Protocol, Mapping, List, Optional
from pathlib import Path

from .models import Part, EncryptedChunk, TransportResponse


class ChunkingStrategy(Protocol):
    """
    Protocol for file chunking strategies.

    Allows different chunking algorithms to be plugged in.
    """

    def calculate_chunks(self, file_size: int) -> List[Part]:
        """
        Calculate part boundaries for a file.

        Args:
            file_size: Total file size in bytes

        Returns:
            Ordered, contiguous parts covering ``[0, file_size)``
        """
        ...


class CipherProtocol(Protocol):
    """Protocol for the symmetric text cipher keyed by the file secret."""

    def encrypt(self, text: str) -> str:
        """Encrypt text into a transportable text envelope."""
        ...

    def decrypt(self, envelope: str) -> str:
        """Invert :meth:`encrypt`."""
        ...


class ChunkEncryptorProtocol(Protocol):
    """Protocol for turning a plaintext part into an encrypted chunk."""

    async def encrypt(self, part: Part) -> EncryptedChunk:
        """
        Read and encrypt a part.

        Raises:
            EncryptionError: If the cipher fails or the read is short
            OSError: If the file cannot be read
        """
        ...


class FileReaderProtocol(Protocol):
    """Protocol for file reading operations."""

    async def read_chunk(
        self,
        file_path: Path,
        start: int,
        end: int
    ) -> bytes:
        """
        Read a range from a file.

        Args:
            file_path: Path to the file
            start: Start position in bytes
            end: End position in bytes (exclusive)

        Returns:
            Range data (shorter than requested only at end of file)
        """
        ...


class TransportProtocol(Protocol):
    """Protocol for HTTP request/response exchanges."""

    async def request(
        self,
        method: str,
        url: str,
        data: Optional[bytes] = None,
        headers: Optional[Mapping[str, str]] = None
    ) -> TransportResponse:
        """
        Perform one HTTP exchange.

        Raises:
            TransportError: On network failure or non-success status
        """
        ...
