"""
Data models for upload module.

Uses dataclasses for immutable, type-safe data structures.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union

from multidict import CIMultiDict, CIMultiDictProxy


@dataclass(frozen=True)
class Part:
    """
    Half-open plaintext byte range ``[start, end)`` of the source file.

    Attributes:
        index: Position of the part in the plan
        start: Start position in bytes
        end: End position in bytes (exclusive)
    """
    index: int
    start: int
    end: int

    @property
    def size(self) -> int:
        """Returns plaintext size."""
        return self.end - self.start


@dataclass(frozen=True)
class EncryptedChunk:
    """
    Encrypted representation of one Part, sent in one PATCH request.

    The size is only known after encryption; it is not a fixed multiple
    of the plaintext size.
    """
    part: Part
    data: bytes

    @property
    def size(self) -> int:
        """Returns encrypted size."""
        return len(self.data)


class SessionState(Enum):
    """Lifecycle of an upload session."""
    UNBOUND = 'unbound'
    INITIALIZING = 'initializing'
    BOUND = 'bound'
    COMPLETED = 'completed'
    ABORTED = 'aborted'
    FAILED = 'failed'

    @property
    def is_terminal(self) -> bool:
        """Returns True once the session can no longer transfer chunks."""
        return self in (SessionState.COMPLETED, SessionState.ABORTED, SessionState.FAILED)


@dataclass
class UploadProgress:
    """
    Running progress of an upload.

    Attributes:
        file_size: Plaintext size of the source file
        total_parts: Number of planned parts
        completed_parts: Parts acknowledged by the server
        real_encrypted_size: Sum of encrypted sizes produced so far
        estimated_encrypted_size: Extrapolated final encrypted size
    """
    file_size: int
    total_parts: int
    completed_parts: int = 0
    real_encrypted_size: int = 0
    estimated_encrypted_size: int = 0

    def record(self, part: Part, chunk: EncryptedChunk) -> None:
        """Account for a freshly encrypted chunk."""
        self.real_encrypted_size += chunk.size
        if part.size > 0:
            self.estimated_encrypted_size = int(chunk.size / part.size * self.file_size)

    @property
    def percentage(self) -> float:
        """Returns upload progress as percentage of parts."""
        if self.total_parts == 0:
            return 0.0
        return (self.completed_parts / self.total_parts) * 100

    @property
    def is_complete(self) -> bool:
        """Returns True if every part has been acknowledged."""
        return self.completed_parts >= self.total_parts


@dataclass(frozen=True)
class UploadResult:
    """
    Result of a successful upload.

    Attributes:
        upload_url: Resolved URL of the upload resource
        file_size: Plaintext size of the uploaded file
        encrypted_size: Final length declared to and acknowledged by the server
        chunks: Number of chunks transferred
    """
    upload_url: str
    file_size: int
    encrypted_size: int
    chunks: int


@dataclass(frozen=True)
class ChunkComplete:
    """
    A chunk was acknowledged.

    Attributes:
        chunk_size: Plaintext size of the part
        bytes_accepted: Server-acknowledged offset after this chunk
        bytes_total: Real final size on the last chunk, estimate otherwise
    """
    chunk_size: int
    bytes_accepted: int
    bytes_total: int


@dataclass(frozen=True)
class UploadSucceeded:
    """Every chunk was acknowledged and the length is final."""
    result: UploadResult


@dataclass(frozen=True)
class UploadFailed:
    """The upload stopped on an error; no success event follows."""
    error: BaseException


UploadEvent = Union[ChunkComplete, UploadSucceeded, UploadFailed]


@dataclass
class TransportResponse:
    """
    Status and headers of an HTTP exchange.

    Header lookup is case-insensitive regardless of what was passed in.
    """
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.headers = CIMultiDictProxy(CIMultiDict(self.headers))
