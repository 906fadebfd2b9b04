"""Tests for the upload driver."""
import asyncio

import pytest

from hvbupload.core.config import UploadOptions
from hvbupload.core.crypto import PassphraseCipher
from hvbupload.core.exceptions import (
    AbortedError,
    EncryptionError,
    ProtocolError,
    TransportError,
    UploadError,
)
from hvbupload.core.upload import EncryptedUploader
from hvbupload.core.upload.cancellation import CancellationToken
from hvbupload.core.upload.models import (
    ChunkComplete,
    SessionState,
    UploadFailed,
    UploadSucceeded,
)
from hvbupload.core.upload.services import AsyncFileReader
from hvbupload.core.upload.strategies import DataUrlChunkEncryptor

MIB = 1024 * 1024
BASE_URL = "https://tus.example.com/files/"


class TestUploadDriver:
    """Test suite for UploadDriver."""

    @pytest.fixture
    def calls(self):
        """Record callback-style notifications."""
        return []

    @pytest.fixture
    def options(self, secret, calls):
        """Create options with 1 MiB parts and recording callbacks."""
        return UploadOptions(
            base_url=BASE_URL,
            file_secret=secret,
            read_chunk_size=MIB,
            on_chunk_complete=lambda *args: calls.append(('chunk', args)),
            on_success=lambda: calls.append(('success', ()))
        )

    @pytest.fixture
    def source(self, make_file):
        """Create a 2.5 MiB source file."""
        return make_file(int(2.5 * MIB))

    @pytest.fixture
    def driver(self, options, source, tus_server):
        """Create a driver wired to the fake server."""
        return EncryptedUploader(options).create_driver(source, tus_server)

    @pytest.fixture
    def events(self, driver):
        """Record every event emitted by the driver."""
        recorded = []
        driver.events.subscribe(recorded.append)
        return recorded

    @pytest.mark.asyncio
    async def test_three_part_upload(self, driver, events, tus_server, calls):
        """Test 2.5 MiB with 1 MiB parts gives three progress events then success."""
        result = await driver.start()

        progress = [e for e in events if isinstance(e, ChunkComplete)]
        assert [e.chunk_size for e in progress] == [MIB, MIB, MIB // 2]
        assert progress[-1].bytes_total == driver.session.offset
        assert isinstance(events[-1], UploadSucceeded)
        assert sum(isinstance(e, UploadSucceeded) for e in events) == 1

        assert [name for name, _ in calls] == ['chunk', 'chunk', 'chunk', 'success']
        assert calls[2][1] == (MIB // 2, driver.session.offset, driver.session.offset)

        assert result.chunks == 3
        assert result.file_size == int(2.5 * MIB)
        assert result.encrypted_size == tus_server.offset
        assert result.upload_url == "https://tus.example.com/files/abc123"
        assert driver.session.state is SessionState.COMPLETED

    @pytest.mark.asyncio
    async def test_offsets_match_accumulated_sizes(self, driver, events, tus_server):
        """Test each acknowledged offset equals the encrypted bytes sent so far."""
        await driver.start()

        progress = [e for e in events if isinstance(e, ChunkComplete)]
        sent = 0
        previous = 0
        for event, chunk in zip(progress, tus_server.chunks):
            sent += len(chunk)
            assert event.bytes_accepted == sent
            assert event.bytes_accepted > previous
            previous = event.bytes_accepted

    @pytest.mark.asyncio
    async def test_length_declared_once_with_real_size(self, driver, tus_server):
        """Test only the last PATCH declares the length, equal to the real total."""
        await driver.start()

        lengths = [h.get('Upload-Length') for _, _, _, h in tus_server.patches]
        assert lengths[:-1] == [None, None]
        assert int(lengths[-1]) == sum(len(c) for c in tus_server.chunks)
        assert tus_server.length == tus_server.offset

    @pytest.mark.asyncio
    async def test_non_final_total_is_estimate(self, driver, events):
        """Test intermediate totals extrapolate the first chunk's expansion."""
        await driver.start()

        first = [e for e in events if isinstance(e, ChunkComplete)][0]
        ratio = first.bytes_accepted / MIB
        assert first.bytes_total == int(ratio * int(2.5 * MIB))
        assert driver.progress.real_encrypted_size == driver.session.offset
        assert driver.progress.percentage == 100.0

    @pytest.mark.asyncio
    async def test_uploaded_chunks_decrypt_to_file(self, driver, source, secret, tus_server):
        """Test the server receives the file encrypted chunk by chunk."""
        await driver.start()

        decryptor = DataUrlChunkEncryptor(source, AsyncFileReader(), PassphraseCipher(secret))
        recovered = b"".join(decryptor.decrypt(chunk) for chunk in tus_server.chunks)
        assert recovered == source.read_bytes()

    @pytest.mark.asyncio
    async def test_missing_location_sends_no_patch(self, driver, events, tus_server, calls):
        """Test creation without Location stops before any chunk."""
        tus_server.location = None

        with pytest.raises(ProtocolError, match="missing location"):
            await driver.start()

        assert tus_server.patches == []
        assert [type(e) for e in events] == [UploadFailed]
        assert isinstance(events[0].error, ProtocolError)
        assert calls == []

    @pytest.mark.asyncio
    async def test_missing_upload_offset_stops_upload(self, driver, events, tus_server, calls):
        """Test a missing acknowledgement ends the upload without further parts."""
        tus_server.omit_offset_on = {0}

        with pytest.raises(ProtocolError):
            await driver.start()

        assert len(tus_server.patches) == 1
        assert [type(e) for e in events] == [UploadFailed]
        assert driver.session.state is SessionState.FAILED
        assert calls == []

    @pytest.mark.asyncio
    async def test_transport_error_not_retried(self, driver, events, tus_server):
        """Test a failing PATCH is not retried."""
        tus_server.fail_on = {1: TransportError("HTTP 502", status=502)}

        with pytest.raises(TransportError):
            await driver.start()

        assert len(tus_server.patches) == 2
        assert [type(e) for e in events] == [ChunkComplete, UploadFailed]

    @pytest.mark.asyncio
    async def test_cancel_between_parts(self, driver, events, tus_server, calls):
        """Test a stop requested after part 0 prevents parts 1 and 2."""
        token = CancellationToken()
        driver.events.subscribe(lambda e: token.cancel() if isinstance(e, ChunkComplete) else None)

        with pytest.raises(AbortedError) as exc_info:
            await driver.start(token)

        assert exc_info.value.part_index == 1
        assert len(tus_server.patches) == 1
        assert driver.session.state is SessionState.ABORTED
        assert isinstance(events[-1], UploadFailed)
        assert ('success', ()) not in calls

    @pytest.mark.asyncio
    async def test_cancel_before_start(self, driver, tus_server):
        """Test a token cancelled up front still creates the resource but sends nothing."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(AbortedError):
            await driver.start(token)

        assert [r[0] for r in tus_server.requests] == ['POST']

    @pytest.mark.asyncio
    async def test_stop_uses_own_token(self, driver, tus_server):
        """Test stop() is honored when no token is passed."""
        driver.events.subscribe(lambda e: driver.stop() if isinstance(e, ChunkComplete) else None)

        with pytest.raises(AbortedError):
            await driver.start()

        assert len(tus_server.patches) == 1

    @pytest.mark.asyncio
    async def test_driver_not_reusable(self, driver):
        """Test a driver runs at most once."""
        await driver.start()

        with pytest.raises(UploadError, match="already started"):
            await driver.start()

    @pytest.mark.asyncio
    async def test_single_part_file(self, options, make_file, tus_server):
        """Test a file smaller than a part is sent as one final chunk."""
        source = make_file(1000, name="small.bin")
        driver = EncryptedUploader(options).create_driver(source, tus_server)

        result = await driver.start()

        assert result.chunks == 1
        assert 'Upload-Length' in tus_server.patches[0][3]

    @pytest.mark.asyncio
    async def test_file_shrinking_mid_upload_fails_session(self, driver, events, source, tus_server, calls):
        """Test a short read on part 1 stops the upload and fails the session."""
        def truncate_after_first_chunk(event):
            if isinstance(event, ChunkComplete):
                with open(source, 'r+b') as f:
                    f.truncate(MIB + 10)
        driver.events.subscribe(truncate_after_first_chunk)

        with pytest.raises(EncryptionError, match="Short read for part 1"):
            await driver.start()

        assert len(tus_server.patches) == 1
        assert [type(e) for e in events] == [ChunkComplete, UploadFailed]
        assert isinstance(events[-1].error, EncryptionError)
        assert driver.session.state is SessionState.FAILED
        assert ('success', ()) not in calls

    @pytest.mark.asyncio
    async def test_cipher_failure_fails_session(self, options, source, secret, tus_server):
        """Test a cipher error on part 1 is fatal and not followed by more parts."""
        class FailingOnSecondCall:
            def __init__(self):
                self._cipher = PassphraseCipher(secret)
                self.calls = 0

            def encrypt(self, text):
                self.calls += 1
                if self.calls == 2:
                    raise ValueError("cipher unavailable")
                return self._cipher.encrypt(text)

            def decrypt(self, envelope):
                return self._cipher.decrypt(envelope)

        driver = EncryptedUploader(options, cipher=FailingOnSecondCall()).create_driver(source, tus_server)
        events = []
        driver.events.subscribe(events.append)

        with pytest.raises(EncryptionError, match="cipher unavailable") as exc_info:
            await driver.start()

        assert exc_info.value.start == MIB
        assert len(tus_server.patches) == 1
        assert [type(e) for e in events] == [ChunkComplete, UploadFailed]
        assert driver.session.state is SessionState.FAILED

    @pytest.mark.asyncio
    async def test_task_cancellation_reported(self, driver, events, tus_server):
        """Test a cancelled exchange emits UploadFailed and fails the session."""
        tus_server.fail_on = {1: asyncio.CancelledError()}

        with pytest.raises(asyncio.CancelledError):
            await driver.start()

        assert [type(e) for e in events] == [ChunkComplete, UploadFailed]
        assert isinstance(events[-1].error, asyncio.CancelledError)
        assert driver.session.state is SessionState.FAILED

    @pytest.mark.asyncio
    async def test_failing_listener_keeps_upload_error(self, driver, tus_server):
        """Test a listener raising on UploadFailed does not replace the upload error."""
        tus_server.location = None

        def broken_listener(event):
            if isinstance(event, UploadFailed):
                raise RuntimeError("listener bug")
        driver.events.subscribe(broken_listener)

        with pytest.raises(ProtocolError, match="missing location"):
            await driver.start()

        assert driver.session.state is SessionState.FAILED
