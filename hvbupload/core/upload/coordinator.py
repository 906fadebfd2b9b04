"""
Upload driver.

Orchestrates the upload process using injected dependencies: plan the
parts, encrypt each one, send it through the session and report progress.
"""
import time
from pathlib import Path
from typing import Optional

from .cancellation import CancellationToken
from .models import (
    Part,
    UploadProgress,
    UploadResult,
    ChunkComplete,
    UploadSucceeded,
    UploadFailed,
)
from .protocols import ChunkingStrategy, ChunkEncryptorProtocol
from .session import UploadSession
from ..events import EventEmitter
from ..exceptions import AbortedError, UploadError
from ..logging import get_logger

logger = get_logger('upload.driver')


class UploadDriver:
    """
    Drives one encrypted upload from plan to finalized length.

    Parts are processed strictly in order; each part's exchange finishes
    before the next part is read. The first error stops the run: nothing
    is retried and the remote resource is left as is.

    One driver serves exactly one transfer.

    Example:
        >>> driver = UploadDriver(path, size, session, encryptor, chunking)
        >>> driver.events.subscribe(print)
        >>> result = await driver.start()
    """

    def __init__(
        self,
        file_path: Path,
        file_size: int,
        session: UploadSession,
        encryptor: ChunkEncryptorProtocol,
        chunking_strategy: ChunkingStrategy,
        events: Optional[EventEmitter] = None
    ):
        """
        Initialize upload driver.

        Args:
            file_path: File being uploaded (used for logging)
            file_size: Plaintext size of the file
            session: Unbound upload session
            encryptor: Part encryptor
            chunking_strategy: Strategy for planning parts
            events: Event emitter; a fresh one is created if omitted
        """
        self._file_path = file_path
        self._file_size = file_size
        self._session = session
        self._encryptor = encryptor
        self._chunking = chunking_strategy
        self._events = events or EventEmitter()
        self._own_token = CancellationToken()
        self._started = False
        self._progress: Optional[UploadProgress] = None

    @property
    def events(self) -> EventEmitter:
        """Single subscription point for progress, success and failure."""
        return self._events

    @property
    def session(self) -> UploadSession:
        return self._session

    @property
    def progress(self) -> Optional[UploadProgress]:
        """Progress of the current run (None before start)."""
        return self._progress

    def stop(self) -> None:
        """Stop before the next part of a run started without an explicit token."""
        self._own_token.cancel()

    async def start(self, cancel_token: Optional[CancellationToken] = None) -> UploadResult:
        """
        Run the upload.

        Args:
            cancel_token: Token checked before each part; defaults to the
                token cancelled by :meth:`stop`

        Returns:
            Upload result

        Raises:
            AbortedError: If cancelled before a part started
            ProtocolError: If the server breaks the offset/location contract
            TransportError: If an HTTP exchange fails
            EncryptionError: If a part cannot be read or encrypted
        """
        if self._started:
            raise UploadError("Upload driver already started")
        self._started = True

        token = cancel_token or self._own_token
        try:
            result = await self._run(token)
        except BaseException as e:
            self._session.fail()
            self._emit_failure(e)
            raise

        self._events.emit(UploadSucceeded(result=result))
        return result

    def _emit_failure(self, error: BaseException) -> None:
        """Emit UploadFailed; a raising listener must not replace the upload error."""
        try:
            self._events.emit(UploadFailed(error=error))
        except Exception:
            logger.exception(f"Listener raised while handling failure: {error!r}")

    async def _run(self, token: CancellationToken) -> UploadResult:
        file_size_mb = self._file_size / (1024 * 1024)
        logger.info(f"Starting upload: {self._file_path.name} ({file_size_mb:.2f} MB)")

        await self._session.initialize()

        parts = self._chunking.calculate_chunks(self._file_size)
        self._progress = UploadProgress(file_size=self._file_size, total_parts=len(parts))
        logger.info(f"File split into {len(parts)} parts")

        upload_start = time.time()
        for part in parts:
            if token.cancelled:
                self._session.abort()
                logger.warning(f"Upload aborted before part {part.index}/{len(parts)}")
                raise AbortedError(part_index=part.index)

            await self._upload_part(part)

        elapsed = time.time() - upload_start
        logger.info(
            f"All parts uploaded: {len(parts)} parts, "
            f"{self._session.real_encrypted_size} encrypted bytes in {elapsed:.2f}s"
        )
        return UploadResult(
            upload_url=self._session.upload_url,
            file_size=self._file_size,
            encrypted_size=self._session.real_encrypted_size,
            chunks=len(parts)
        )

    async def _upload_part(self, part: Part) -> None:
        """Encrypt, send and report one part."""
        progress = self._progress
        chunk = await self._encryptor.encrypt(part)
        progress.record(part, chunk)

        is_final = part.end >= self._file_size
        offset = await self._session.send_chunk(chunk, is_final)
        progress.completed_parts += 1

        bytes_total = self._session.real_encrypted_size if is_final else progress.estimated_encrypted_size
        self._events.emit(ChunkComplete(
            chunk_size=part.size,
            bytes_accepted=offset,
            bytes_total=bytes_total
        ))
