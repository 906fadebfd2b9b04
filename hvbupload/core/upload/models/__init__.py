"""Upload models."""
from .upload_models import (
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

__all__ = [
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
]
