"""
hvbupload - Async client-side encrypted uploads over the tus protocol.

Usage:
    >>> from hvbupload import EncryptedUploader, UploadOptions
    >>>
    >>> uploader = EncryptedUploader(UploadOptions(
    ...     base_url="https://tus.example.com/files/",
    ...     file_secret="secret"
    ... ))
    >>> result = await uploader.upload("video.mp4")
"""
from .core.logging import setup_logging, get_logger, LOGGERS

from .core.config import UploadOptions, TimeoutConfig
from .core.exceptions import (
    UploadError,
    ProtocolError,
    TransportError,
    EncryptionError,
    AbortedError,
)
from .core.upload import (
    EncryptedUploader,
    UploadDriver,
    UploadSession,
    CancellationToken,
    UploadResult,
    ChunkComplete,
    UploadSucceeded,
    UploadFailed,
)

__version__ = '1.0.0'

__all__ = [
    'UploadOptions',
    'TimeoutConfig',
    'UploadError',
    'ProtocolError',
    'TransportError',
    'EncryptionError',
    'AbortedError',
    'EncryptedUploader',
    'UploadDriver',
    'UploadSession',
    'CancellationToken',
    'UploadResult',
    'ChunkComplete',
    'UploadSucceeded',
    'UploadFailed',
    'setup_logging',
    'get_logger',
    '__version__',
]
