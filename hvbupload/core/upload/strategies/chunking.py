"""
Chunking strategies for file uploads.

Implements Strategy Pattern for different chunking algorithms.
"""
import math
from abc import ABC, abstractmethod
from typing import List

from ..models import Part


def plan_parts(file_size: int, chunk_size: int) -> List[Part]:
    """
    Split ``[0, file_size)`` into fixed-size parts.

    The part count is ``ceil(file_size / chunk_size)``; the last part is
    clamped to ``file_size`` so it never reaches past the end of the file.

    Args:
        file_size: Total plaintext size in bytes
        chunk_size: Plaintext bytes per part

    Returns:
        Ordered list of parts (empty for an empty file)

    Raises:
        ValueError: If chunk_size is not positive or file_size is negative
    """
    if chunk_size <= 0:
        raise ValueError("Chunk size must be positive")
    if file_size < 0:
        raise ValueError("File size cannot be negative")

    count = math.ceil(file_size / chunk_size)
    return [
        Part(
            index=i,
            start=i * chunk_size,
            end=min((i + 1) * chunk_size, file_size)
        )
        for i in range(count)
    ]


class BaseChunkingStrategy(ABC):
    """Abstract base class for chunking strategies."""

    @abstractmethod
    def calculate_chunks(self, file_size: int) -> List[Part]:
        """Calculate part boundaries."""
        pass


class FixedSizeChunkingStrategy(BaseChunkingStrategy):
    """
    Simple fixed-size chunking strategy.

    Every part has ``chunk_size`` plaintext bytes except possibly the last.
    """

    DEFAULT_CHUNK_SIZE = 1024 * 1024  # 1MB

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """
        Initialize with chunk size.

        Args:
            chunk_size: Size of each part in bytes
        """
        if chunk_size <= 0:
            raise ValueError("Chunk size must be positive")
        self.chunk_size = chunk_size

    def calculate_chunks(self, file_size: int) -> List[Part]:
        """
        Calculate fixed-size part boundaries.

        Args:
            file_size: Total file size in bytes

        Returns:
            List of parts
        """
        return plan_parts(file_size, self.chunk_size)
