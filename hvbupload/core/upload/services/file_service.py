"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import Tuple, Optional, Union
import logging
import aiofiles


class FileValidator:
    """
    Validates files before upload.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If path is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if not path.is_file():
            raise ValueError(f"Path is not a file: {path}")

        return path, path.stat().st_size

    def validate_size(self, file_size: int, max_size: Optional[int] = None) -> None:
        """
        Validate file size.

        An empty file has no parts, so its deferred length could never be
        declared.

        Raises:
            ValueError: If file is empty or exceeds max size
        """
        if file_size == 0:
            raise ValueError("Cannot upload empty file")

        if max_size and file_size > max_size:
            raise ValueError(
                f"File size {file_size} exceeds maximum {max_size}"
            )


class AsyncFileReader:
    """
    Asynchronous file reader for range-based reading.

    Uses aiofiles for non-blocking I/O operations. Keeps the file handle
    open during an upload to avoid repeated open/close operations.
    Read errors propagate to the caller.
    """

    def __init__(self):
        """Initialize file reader."""
        self._logger = logging.getLogger('hvbupload.upload.file')
        self._file_handle = None
        self._current_file_path: Optional[Path] = None

    async def open_file(self, file_path: Path) -> None:
        """
        Open file for reading. Call this before reading ranges.

        Args:
            file_path: Path to the file to open
        """
        if self._file_handle is not None and self._current_file_path == file_path:
            return

        if self._file_handle is not None:
            await self.close_file()

        self._file_handle = await aiofiles.open(file_path, 'rb')
        self._current_file_path = file_path

    async def close_file(self) -> None:
        """Close the currently open file."""
        if self._file_handle is not None:
            await self._file_handle.close()
            self._file_handle = None
            self._current_file_path = None

    async def read_chunk(
        self,
        file_path: Path,
        start: int,
        end: int
    ) -> bytes:
        """
        Read ``[start, end)`` from a file.

        Reuses the open handle if there is one, otherwise opens and
        closes the file around the read.

        Args:
            file_path: Path to the file
            start: Start position in bytes
            end: End position in bytes (exclusive)

        Returns:
            Range data; shorter than requested if the file ends early

        Raises:
            OSError: If the file cannot be opened or read
        """
        size = end - start

        try:
            if self._file_handle is not None and self._current_file_path == file_path:
                await self._file_handle.seek(start)
                data = await self._file_handle.read(size)
            else:
                async with aiofiles.open(file_path, 'rb') as f:
                    await f.seek(start)
                    data = await f.read(size)
        except OSError as e:
            self._logger.error(f"Failed to read range {start}-{end}: {e}")
            raise

        self._logger.debug(f"Read range: {start}-{end} ({len(data)} bytes)")
        return data
