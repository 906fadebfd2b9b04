"""
Upload configuration module.

Dataclasses describing where to upload, how to encrypt, how large the
plaintext parts are and how long the transport may wait.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Callable

DEFAULT_READ_CHUNK_SIZE = 1024 * 1024  # 1MB
TUS_VERSION = '1.0.0'


@dataclass
class TimeoutConfig:
    """
    Timeout configuration.

    Granular control over different timeout types. Timeouts live in the
    transport only; the upload engine itself never times out.
    """
    total: float = 300.0  # Total request timeout
    connect: float = 30.0  # Connection timeout
    sock_read: float = 60.0  # Socket read timeout
    sock_connect: float = 30.0  # Socket connect timeout

    def to_aiohttp_timeout(self):
        """Convert to aiohttp ClientTimeout."""
        import aiohttp
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class UploadOptions:
    """
    Options for one encrypted upload.

    Attributes:
        base_url: Creation endpoint of the tus server
        file_secret: Passphrase used to encrypt every chunk
        read_chunk_size: Plaintext bytes per part
        on_chunk_complete: Optional callback (chunk_size, bytes_accepted, bytes_total)
        on_success: Optional callback fired once after the last chunk
        timeout: Transport timeouts
        extra_headers: Headers added to every request (auth tokens etc.)
        media_type: Media type written into the data URL before encryption
        max_file_size: Optional upper bound on the plaintext file size

    Example:
        >>> options = UploadOptions(
        ...     base_url="https://tus.example.com/files/",
        ...     file_secret="correct horse battery staple",
        ...     read_chunk_size=512 * 1024
        ... )
    """
    base_url: str
    file_secret: str
    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE
    on_chunk_complete: Optional[Callable[[int, int, int], None]] = None
    on_success: Optional[Callable[[], None]] = None
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    extra_headers: Dict[str, str] = field(default_factory=dict)
    media_type: str = 'application/octet-stream'
    max_file_size: Optional[int] = None

    def __post_init__(self):
        """Validate options."""
        if not self.base_url:
            raise ValueError("base_url is required")
        if not self.file_secret:
            raise ValueError("file_secret is required")
        if self.read_chunk_size is None:
            self.read_chunk_size = DEFAULT_READ_CHUNK_SIZE
        if self.read_chunk_size <= 0:
            raise ValueError("read_chunk_size must be positive")
        if self.max_file_size is not None and self.max_file_size <= 0:
            raise ValueError("max_file_size must be positive")
