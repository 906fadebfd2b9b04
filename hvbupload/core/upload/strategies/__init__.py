"""Upload strategies module."""
from .chunking import FixedSizeChunkingStrategy, plan_parts
from .encryption import DataUrlChunkEncryptor

__all__ = [
    'FixedSizeChunkingStrategy',
    'plan_parts',
    'DataUrlChunkEncryptor',
]
