"""Tests for chunk encryption."""
import pytest
from unittest.mock import Mock, AsyncMock

from hvbupload.core.crypto import PassphraseCipher
from hvbupload.core.exceptions import EncryptionError
from hvbupload.core.upload.models import Part
from hvbupload.core.upload.services import AsyncFileReader
from hvbupload.core.upload.strategies.encryption import DataUrlChunkEncryptor


class TestDataUrlChunkEncryptor:
    """Test suite for DataUrlChunkEncryptor."""

    @pytest.fixture
    def source(self, make_file):
        """Create a 10 KB source file."""
        return make_file(10 * 1024)

    @pytest.fixture
    def encryptor(self, source, secret):
        """Create encryptor over the source file."""
        return DataUrlChunkEncryptor(source, AsyncFileReader(), PassphraseCipher(secret))

    @pytest.mark.asyncio
    async def test_encrypt_then_decrypt(self, encryptor, source):
        """Test decrypting a chunk returns the original range."""
        part = Part(index=1, start=1000, end=4000)

        chunk = await encryptor.encrypt(part)

        assert chunk.part == part
        assert encryptor.decrypt(chunk.data) == source.read_bytes()[1000:4000]

    @pytest.mark.asyncio
    async def test_whole_file_round_trip(self, encryptor, source):
        """Test every byte of the file survives across parts."""
        content = source.read_bytes()
        parts = [Part(0, 0, 4096), Part(1, 4096, 8192), Part(2, 8192, len(content))]

        recovered = b"".join([encryptor.decrypt((await encryptor.encrypt(p)).data) for p in parts])

        assert recovered == content

    @pytest.mark.asyncio
    async def test_encrypted_size_exceeds_plain_size(self, encryptor):
        """Test base64 and cipher overhead grow the chunk."""
        part = Part(index=0, start=0, end=3000)

        chunk = await encryptor.encrypt(part)

        assert chunk.size == len(chunk.data)
        assert chunk.size > part.size * 4 // 3

    @pytest.mark.asyncio
    async def test_chunk_is_ascii_envelope(self, encryptor):
        """Test chunk bytes are the cipher's text envelope."""
        chunk = await encryptor.encrypt(Part(index=0, start=0, end=10))

        chunk.data.decode('ascii')

    @pytest.mark.asyncio
    async def test_media_type_in_plaintext(self, source, secret):
        """Test configured media type is written into the data URL."""
        cipher = PassphraseCipher(secret)
        encryptor = DataUrlChunkEncryptor(source, AsyncFileReader(), cipher, media_type="image/png")

        chunk = await encryptor.encrypt(Part(index=0, start=0, end=10))

        assert cipher.decrypt(chunk.data.decode()).startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_short_read_raises(self, encryptor):
        """Test a range past the end of the file raises EncryptionError."""
        part = Part(index=3, start=10 * 1024 - 10, end=10 * 1024 + 10)

        with pytest.raises(EncryptionError, match="Short read") as exc_info:
            await encryptor.encrypt(part)

        assert exc_info.value.start == part.start
        assert exc_info.value.end == part.end

    @pytest.mark.asyncio
    async def test_cipher_failure_raises(self, source):
        """Test cipher errors are wrapped in EncryptionError."""
        cipher = Mock()
        cipher.encrypt.side_effect = ValueError("boom")
        encryptor = DataUrlChunkEncryptor(source, AsyncFileReader(), cipher)

        with pytest.raises(EncryptionError, match="boom"):
            await encryptor.encrypt(Part(index=0, start=0, end=10))

    @pytest.mark.asyncio
    async def test_read_error_propagates(self, source, secret):
        """Test OSError from the reader is not swallowed."""
        reader = Mock()
        reader.read_chunk = AsyncMock(side_effect=OSError("disk gone"))
        encryptor = DataUrlChunkEncryptor(source, reader, PassphraseCipher(secret))

        with pytest.raises(OSError, match="disk gone"):
            await encryptor.encrypt(Part(index=0, start=0, end=10))

    def test_decrypt_garbage_raises(self, encryptor):
        """Test undecryptable data raises EncryptionError."""
        with pytest.raises(EncryptionError):
            encryptor.decrypt(b"not an envelope")

    @pytest.mark.asyncio
    async def test_decrypt_with_wrong_secret_raises(self, source, encryptor):
        """Test chunks cannot be decrypted with another secret."""
        chunk = await encryptor.encrypt(Part(index=0, start=0, end=100))
        other = DataUrlChunkEncryptor(source, AsyncFileReader(), PassphraseCipher("other"))

        with pytest.raises(EncryptionError):
            other.decrypt(chunk.data)
