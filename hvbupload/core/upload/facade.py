"""
Upload facade.

Provides a simplified interface for encrypted uploads.
Follows Facade Pattern - hides the wiring of reader, cipher, session
and driver.
"""
from pathlib import Path
from typing import Callable, Optional, Union
import logging

from .cancellation import CancellationToken
from .coordinator import UploadDriver
from .models import UploadResult, UploadEvent, ChunkComplete, UploadSucceeded
from .protocols import CipherProtocol, TransportProtocol
from .services import FileValidator, AsyncFileReader, AiohttpTransport
from .session import UploadSession
from .strategies import FixedSizeChunkingStrategy, DataUrlChunkEncryptor
from ..config import UploadOptions
from ..crypto import PassphraseCipher


class EncryptedUploader:
    """
    Simplified interface for client-side encrypted tus uploads.

    Example:
        >>> from hvbupload import EncryptedUploader, UploadOptions
        >>> uploader = EncryptedUploader(UploadOptions(
        ...     base_url="https://tus.example.com/files/",
        ...     file_secret="secret"
        ... ))
        >>> result = await uploader.upload("report.pdf")
        >>> print(result.upload_url)
    """

    def __init__(
        self,
        options: UploadOptions,
        transport: Optional[TransportProtocol] = None,
        cipher: Optional[CipherProtocol] = None,
        log_level: Optional[int] = None
    ):
        """
        Initialize uploader.

        Args:
            options: Upload options
            transport: Optional HTTP transport; an aiohttp one is created
                (and closed) per upload if omitted
            cipher: Optional cipher; defaults to PassphraseCipher(file_secret)
            log_level: Optional level for the 'hvbupload.upload' logger
        """
        self._options = options
        self._transport = transport
        self._cipher = cipher or PassphraseCipher(options.file_secret)
        self._validator = FileValidator()
        self._logger = logging.getLogger('hvbupload.upload')
        if log_level is not None:
            self._logger.setLevel(log_level)

    def _adapt_callbacks(self, event: UploadEvent) -> None:
        """Forward events to the callback-style options."""
        if isinstance(event, ChunkComplete) and self._options.on_chunk_complete:
            self._options.on_chunk_complete(event.chunk_size, event.bytes_accepted, event.bytes_total)
        elif isinstance(event, UploadSucceeded) and self._options.on_success:
            self._options.on_success()

    def create_driver(
        self,
        file_path: Union[str, Path],
        transport: TransportProtocol,
        reader: Optional[AsyncFileReader] = None
    ) -> UploadDriver:
        """
        Build a driver for one file.

        Args:
            file_path: File to upload
            transport: HTTP transport used by the session
            reader: Optional file reader

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a file, or the file is empty or too large
        """
        path, file_size = self._validator.validate(file_path)
        self._validator.validate_size(file_size, self._options.max_file_size)

        session = UploadSession(
            self._options.base_url,
            transport,
            headers=self._options.extra_headers
        )
        encryptor = DataUrlChunkEncryptor(
            path,
            reader or AsyncFileReader(),
            self._cipher,
            media_type=self._options.media_type
        )
        driver = UploadDriver(
            path,
            file_size,
            session,
            encryptor,
            FixedSizeChunkingStrategy(self._options.read_chunk_size)
        )
        driver.events.subscribe(self._adapt_callbacks)
        return driver

    async def upload(
        self,
        file_path: Union[str, Path],
        cancel_token: Optional[CancellationToken] = None,
        listener: Optional[Callable[[UploadEvent], None]] = None
    ) -> UploadResult:
        """
        Encrypt and upload a file.

        Args:
            file_path: File to upload
            cancel_token: Optional token checked before each part
            listener: Optional event listener subscribed before the run

        Returns:
            Upload result

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a file, or the file is empty or too large
            UploadError: Any protocol, transport, encryption or abort error
        """
        transport = self._transport or AiohttpTransport(timeout=self._options.timeout)
        reader = AsyncFileReader()
        try:
            driver = self.create_driver(file_path, transport, reader)
            if listener is not None:
                driver.events.subscribe(listener)
            await reader.open_file(Path(file_path))
            return await driver.start(cancel_token)
        finally:
            await reader.close_file()
            if self._transport is None:
                await transport.close()
