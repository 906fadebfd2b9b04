"""
Passphrase-based symmetric cipher.

Produces the simple-crypto-js text envelope:

    salt (32 hex) | iv (32 hex) | AES-256-CBC ciphertext (base64) | HMAC-SHA256 (64 hex)

The key is derived per message from the secret and a random salt, so two
encryptions of the same text never produce the same output. Output length
depends on padding and base64 expansion, never on the input length alone.
"""
import base64
import binascii
from Crypto.Cipher import AES
from Crypto.Hash import HMAC, SHA256
from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad, unpad


class PassphraseCipher:
    """AES-CBC text cipher keyed by a passphrase."""

    SALT_SIZE = 16
    IV_SIZE = 16
    KEY_SIZE = 32
    ITERATIONS = 100
    MAC_HEX_SIZE = 64

    def __init__(self, secret: str, iterations: int = ITERATIONS):
        """
        Initialize cipher.

        Args:
            secret: Passphrase shared by uploader and downloader
            iterations: PBKDF2 iteration count
        """
        if not secret:
            raise ValueError("Secret cannot be empty")
        self._secret = secret.encode('utf-8')
        self._iterations = iterations
        self._mac_key = SHA256.new(self._secret).digest()

    def _derive_key(self, salt: bytes) -> bytes:
        return PBKDF2(
            self._secret,
            salt,
            dkLen=self.KEY_SIZE,
            count=self._iterations,
            hmac_hash_module=SHA256
        )

    def _mac(self, message: str) -> HMAC.HMAC:
        return HMAC.new(self._mac_key, message.encode('ascii'), digestmod=SHA256)

    def encrypt(self, text: str) -> str:
        """
        Encrypt text.

        Args:
            text: Plain text (any unicode)

        Returns:
            ASCII envelope
        """
        salt = get_random_bytes(self.SALT_SIZE)
        iv = get_random_bytes(self.IV_SIZE)
        cipher = AES.new(self._derive_key(salt), AES.MODE_CBC, iv=iv)
        ciphertext = cipher.encrypt(pad(text.encode('utf-8'), AES.block_size))

        transit = salt.hex() + iv.hex() + base64.b64encode(ciphertext).decode('ascii')
        return transit + self._mac(transit).hexdigest()

    def decrypt(self, envelope: str) -> str:
        """
        Decrypt an envelope produced by :meth:`encrypt`.

        Raises:
            ValueError: If the envelope is malformed, tampered with or
                was produced with a different secret
        """
        header_size = (self.SALT_SIZE + self.IV_SIZE) * 2
        if len(envelope) <= header_size + self.MAC_HEX_SIZE:
            raise ValueError("Envelope too short")

        transit = envelope[:-self.MAC_HEX_SIZE]
        mac_hex = envelope[-self.MAC_HEX_SIZE:]
        try:
            self._mac(transit).hexverify(mac_hex)
        except ValueError as e:
            raise ValueError("Envelope authentication failed") from e

        try:
            salt = bytes.fromhex(transit[:self.SALT_SIZE * 2])
            iv = bytes.fromhex(transit[self.SALT_SIZE * 2:header_size])
            ciphertext = base64.b64decode(transit[header_size:], validate=True)
        except (ValueError, binascii.Error) as e:
            raise ValueError(f"Malformed envelope: {e}") from e

        cipher = AES.new(self._derive_key(salt), AES.MODE_CBC, iv=iv)
        return unpad(cipher.decrypt(ciphertext), AES.block_size).decode('utf-8')
