"""Encoding utilities."""
import base64
import binascii


class DataUrlEncoder:
    """Encodes binary data as ``data:<media-type>;base64,<payload>`` text."""

    PREFIX = 'data:'
    MARKER = ';base64,'

    @staticmethod
    def encode(data: bytes, media_type: str = 'application/octet-stream') -> str:
        """Encodes bytes to a base64 data URL."""
        payload = base64.b64encode(data).decode('ascii')
        return f"{DataUrlEncoder.PREFIX}{media_type}{DataUrlEncoder.MARKER}{payload}"

    @staticmethod
    def decode(text: str) -> bytes:
        """Decodes a base64 data URL back to bytes."""
        if not text.startswith(DataUrlEncoder.PREFIX):
            raise ValueError("Not a data URL")
        header, sep, payload = text.partition(',')
        if not sep or not header.endswith(';base64'):
            raise ValueError("Data URL is not base64 encoded")
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e
