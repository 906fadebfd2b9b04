"""
Encrypt and upload a file to a tus server
"""
import asyncio
from hvbupload import (
    EncryptedUploader,
    UploadOptions,
    CancellationToken,
    ChunkComplete,
    AbortedError,
)


async def main():
    # Callback-style options
    options = UploadOptions(
        base_url="https://tus.example.com/files/",
        file_secret="correct horse battery staple",
        on_chunk_complete=lambda size, accepted, total: print(f"{accepted}/{total} bytes"),
        on_success=lambda: print("Done"),
    )
    result = await EncryptedUploader(options).upload("document.pdf")
    print(f"Uploaded to {result.upload_url} ({result.encrypted_size} encrypted bytes)")

    # Event stream with cancellation
    token = CancellationToken()

    def on_event(event):
        if isinstance(event, ChunkComplete):
            pct = event.bytes_accepted / event.bytes_total * 100
            print(f"Progress: {pct:.1f}%")
            if event.bytes_accepted > 50 * 1024 * 1024:
                token.cancel()  # stops before the next chunk

    uploader = EncryptedUploader(UploadOptions(
        base_url="https://tus.example.com/files/",
        file_secret="correct horse battery staple",
        read_chunk_size=4 * 1024 * 1024,
    ))
    try:
        await uploader.upload("large_file.zip", cancel_token=token, listener=on_event)
    except AbortedError as e:
        print(f"Stopped before part {e.part_index}")


if __name__ == "__main__":
    asyncio.run(main())
