"""
Upload module for client-side encrypted tus uploads.

Parts of a local file are encrypted one by one and appended to a
deferred-length tus resource; the real length is declared with the last
chunk.
"""
from .facade import EncryptedUploader
from .coordinator import UploadDriver
from .session import UploadSession
from .cancellation import CancellationToken
from .models import (
    Part,
    EncryptedChunk,
    SessionState,
    UploadProgress,
    UploadResult,
    ChunkComplete,
    UploadSucceeded,
    UploadFailed,
    UploadEvent,
    TransportResponse,
)
from .protocols import (
    ChunkingStrategy,
    CipherProtocol,
    ChunkEncryptorProtocol,
    FileReaderProtocol,
    TransportProtocol,
)

__all__ = [
    # Main classes
    'EncryptedUploader',
    'UploadDriver',
    'UploadSession',
    'CancellationToken',

    # Models
    'Part',
    'EncryptedChunk',
    'SessionState',
    'UploadProgress',
    'UploadResult',
    'ChunkComplete',
    'UploadSucceeded',
    'UploadFailed',
    'UploadEvent',
    'TransportResponse',

    # Protocols
    'ChunkingStrategy',
    'CipherProtocol',
    'ChunkEncryptorProtocol',
    'FileReaderProtocol',
    'TransportProtocol',
]
