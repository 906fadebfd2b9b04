"""
Upload session.

Holds the protocol state of one tus upload resource: the resolved URL,
the server-acknowledged offset and the final encrypted length.
"""
from typing import Optional, Mapping, Dict
from urllib.parse import urljoin

from .models import EncryptedChunk, SessionState
from .protocols import TransportProtocol
from ..config import TUS_VERSION
from ..exceptions import ProtocolError, UploadError
from ..logging import get_logger

logger = get_logger('upload.session')


class UploadSession:
    """
    Protocol state holder for a deferred-length tus upload.

    State machine::

        UNBOUND -> INITIALIZING -> BOUND -> COMPLETED | ABORTED | FAILED

    Chunks must be sent strictly in order: the offset acknowledged for
    one chunk addresses the next.
    """

    def __init__(
        self,
        base_url: str,
        transport: TransportProtocol,
        headers: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize session.

        Args:
            base_url: Creation endpoint
            transport: HTTP transport
            headers: Extra headers sent with every request
        """
        self._base_url = base_url
        self._transport = transport
        self._headers: Dict[str, str] = dict(headers or {})
        self._upload_url: Optional[str] = None
        self._offset = 0
        self._real_encrypted_size = 0
        self._state = SessionState.UNBOUND

    @property
    def upload_url(self) -> Optional[str]:
        """Resolved upload resource URL (None until initialized)."""
        return self._upload_url

    @property
    def offset(self) -> int:
        """Encrypted bytes acknowledged by the server."""
        return self._offset

    @property
    def real_encrypted_size(self) -> int:
        """Encrypted bytes sent so far; final once the session completes."""
        return self._real_encrypted_size

    @property
    def state(self) -> SessionState:
        return self._state

    def _request_headers(self, **extra: str) -> Dict[str, str]:
        return {**self._headers, 'Tus-Resumable': TUS_VERSION, **extra}

    async def initialize(self) -> str:
        """
        Create the upload resource with a deferred length.

        Returns:
            Resolved upload URL

        Raises:
            ProtocolError: If already initialized or no Location is returned
            TransportError: If the request fails
        """
        if self._state is not SessionState.UNBOUND:
            raise ProtocolError(f"Session already initialized (state={self._state.value})")

        self._state = SessionState.INITIALIZING
        logger.debug(f"Creating upload resource at {self._base_url}")

        try:
            response = await self._transport.request(
                'POST',
                self._base_url,
                headers=self._request_headers(**{'Upload-Defer-Length': '1'})
            )
            location = response.headers.get('Location')
            if not location:
                raise ProtocolError("missing location", status=response.status)
        except UploadError:
            self._state = SessionState.FAILED
            raise

        self._upload_url = urljoin(self._base_url, location)
        self._state = SessionState.BOUND
        logger.info(f"Upload resource created: {self._upload_url}")
        return self._upload_url

    async def send_chunk(self, chunk: EncryptedChunk, is_final: bool) -> int:
        """
        Send one encrypted chunk at the current offset.

        On the final chunk the total encrypted length, now known, is
        declared with ``Upload-Length``.

        Args:
            chunk: Encrypted chunk
            is_final: Whether this is the last chunk of the file

        Returns:
            New acknowledged offset

        Raises:
            ProtocolError: If not initialized or the acknowledgement is invalid
            TransportError: If the request fails
        """
        if self._upload_url is None or self._state is not SessionState.BOUND:
            raise ProtocolError(f"not initialized (state={self._state.value})")

        sent_offset = self._offset
        real_size = self._real_encrypted_size + chunk.size
        extra = {
            'Content-Type': 'application/octet-stream',
            'Upload-Offset': str(sent_offset),
        }
        if is_final:
            extra['Upload-Length'] = str(real_size)

        try:
            response = await self._transport.request(
                'PATCH',
                self._upload_url,
                data=chunk.data,
                headers=self._request_headers(**extra)
            )
            new_offset = self._parse_offset(response.headers.get('Upload-Offset'))
            if new_offset != sent_offset + chunk.size:
                raise ProtocolError(
                    f"offset mismatch: sent {chunk.size} bytes at {sent_offset}, "
                    f"server acknowledged {new_offset}",
                    status=response.status
                )
        except UploadError:
            self._state = SessionState.FAILED
            raise

        self._offset = new_offset
        self._real_encrypted_size = real_size
        if is_final:
            self._state = SessionState.COMPLETED
            logger.info(f"Upload length finalized at {real_size} bytes")

        logger.debug(f"Chunk {chunk.part.index} acknowledged: offset {sent_offset} -> {new_offset}")
        return new_offset

    def abort(self) -> None:
        """Mark a non-terminal session as aborted."""
        if not self._state.is_terminal:
            self._state = SessionState.ABORTED
            logger.info("Upload session aborted")

    def fail(self) -> None:
        """Mark a non-terminal session as failed."""
        if not self._state.is_terminal:
            self._state = SessionState.FAILED
            logger.info("Upload session failed")

    @staticmethod
    def _parse_offset(value: Optional[str]) -> int:
        """Parse an ``Upload-Offset`` header that must be a positive integer."""
        if value is None:
            raise ProtocolError("offset mismatch: Upload-Offset header missing")
        try:
            offset = int(value.strip())
        except ValueError:
            raise ProtocolError(f"offset mismatch: invalid Upload-Offset {value!r}") from None
        if offset <= 0:
            raise ProtocolError(f"offset mismatch: Upload-Offset must be positive, got {offset}")
        return offset
