"""Pytest fixtures for hvbupload tests."""
import os
from typing import Dict, List, Optional, Set

import pytest
from multidict import CIMultiDict

from hvbupload.core.upload.models import TransportResponse

MIB = 1024 * 1024


class FakeTusServer:
    """
    In-memory tus server implementing the transport capability.

    Stores every PATCH body separately so tests can decrypt chunks one by one.
    Knobs let a test break the protocol at a chosen PATCH (0-based).
    """

    def __init__(self, location: Optional[str] = '/files/abc123'):
        self.location = location
        self.requests: List[tuple] = []
        self.chunks: List[bytes] = []
        self.offset = 0
        self.length: Optional[int] = None
        self.omit_offset_on: Set[int] = set()
        self.offset_override: Dict[int, str] = {}
        self.fail_on: Dict[int, Exception] = {}

    @property
    def patches(self) -> List[tuple]:
        return [r for r in self.requests if r[0] == 'PATCH']

    async def request(self, method, url, data=None, headers=None):
        headers = CIMultiDict(headers or {})
        self.requests.append((method, url, data, headers))

        if method == 'POST':
            response_headers = {'Location': self.location} if self.location else {}
            return TransportResponse(status=201, headers=response_headers)

        index = len(self.patches) - 1
        if index in self.fail_on:
            raise self.fail_on[index]

        assert int(headers['Upload-Offset']) == self.offset
        self.chunks.append(data)
        self.offset += len(data)
        if 'Upload-Length' in headers:
            self.length = int(headers['Upload-Length'])

        if index in self.omit_offset_on:
            return TransportResponse(status=204, headers={})
        value = self.offset_override.get(index, str(self.offset))
        return TransportResponse(status=204, headers={'Upload-Offset': value})


@pytest.fixture
def secret():
    """Returns a file secret."""
    return "correct horse battery staple"


@pytest.fixture
def tus_server():
    """Returns a fresh fake tus server."""
    return FakeTusServer()


@pytest.fixture
def make_file(tmp_path):
    """Factory creating a file of random bytes with the given size."""
    def _make(size: int, name: str = "payload.bin"):
        path = tmp_path / name
        path.write_bytes(os.urandom(size))
        return path
    return _make
