"""
Encryption strategies for file uploads.

Implements Strategy Pattern for turning plaintext parts into chunks.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from ..models import Part, EncryptedChunk
from ..protocols import CipherProtocol, FileReaderProtocol
from ...crypto import DataUrlEncoder
from ...exceptions import EncryptionError

logger = logging.getLogger('hvbupload.upload.encryption')


class BaseChunkEncryptor(ABC):
    """Abstract base class for chunk encryptors."""

    @abstractmethod
    async def encrypt(self, part: Part) -> EncryptedChunk:
        """Read and encrypt a part."""
        pass

    @abstractmethod
    def decrypt(self, data: bytes) -> bytes:
        """Recover the plaintext of an encrypted chunk."""
        pass


class DataUrlChunkEncryptor(BaseChunkEncryptor):
    """
    Encrypts parts as passphrase-cipher envelopes of base64 data URLs.

    Each part is read, wrapped as ``data:<media-type>;base64,...`` text,
    encrypted and sent as the UTF-8 bytes of the envelope. Base64 expansion
    plus cipher overhead make the chunk size roughly 4/3 of the part size,
    but never exactly predictable.
    """

    def __init__(
        self,
        file_path: Path,
        reader: FileReaderProtocol,
        cipher: CipherProtocol,
        media_type: str = 'application/octet-stream'
    ):
        """
        Initialize encryptor.

        Args:
            file_path: File the parts belong to
            reader: Byte-range reader
            cipher: Text cipher keyed by the file secret
            media_type: Media type written into the data URL
        """
        self._file_path = file_path
        self._reader = reader
        self._cipher = cipher
        self._media_type = media_type
        self._encoder = DataUrlEncoder()

    async def encrypt(self, part: Part) -> EncryptedChunk:
        """
        Read and encrypt a part.

        Args:
            part: Plaintext range to encrypt

        Returns:
            Encrypted chunk

        Raises:
            EncryptionError: If the read is short or the cipher fails
            OSError: If the file cannot be read
        """
        data = await self._reader.read_chunk(self._file_path, part.start, part.end)
        if len(data) != part.size:
            raise EncryptionError(
                f"Short read for part {part.index}: expected {part.size} bytes, got {len(data)}",
                start=part.start,
                end=part.end
            )

        text = self._encoder.encode(data, self._media_type)
        del data

        try:
            envelope = self._cipher.encrypt(text)
        except (ValueError, TypeError) as e:
            raise EncryptionError(
                f"Cipher failed for part {part.index}: {e}",
                start=part.start,
                end=part.end
            ) from e

        chunk = EncryptedChunk(part=part, data=envelope.encode('utf-8'))
        logger.debug(f"Encrypted part {part.index}: {part.size} -> {chunk.size} bytes")
        return chunk

    def decrypt(self, data: bytes) -> bytes:
        """
        Recover the plaintext of an encrypted chunk.

        Args:
            data: Chunk bytes as produced by :meth:`encrypt`

        Returns:
            Original part bytes

        Raises:
            EncryptionError: If the chunk cannot be decrypted or decoded
        """
        try:
            text = self._cipher.decrypt(data.decode('utf-8'))
            return self._encoder.decode(text)
        except ValueError as e:
            raise EncryptionError(f"Cannot decrypt chunk: {e}") from e
