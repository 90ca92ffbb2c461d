"""Codec between clear-text EncryptedString values and stored cipher-text tokens.

A token is ``base64(cipher bytes) + "@" + base64(IV bytes)``. Each encryption
uses a fresh random IV which travels with the cipher text, so every stored
value can be decrypted on its own and equal clear texts never produce equal
tokens.
"""

import base64
import functools
import io
import logging
from collections.abc import Sequence

from dbcrypt.constants import DECRYPT_CHUNK_BLOCKS, MALFORMED_TOKEN_MESSAGE, TEXT_ENCODING, TOKEN_SEPARATOR
from dbcrypt.exceptions import DecryptionFailedError, InvalidEncodingError, MalformedTokenError, NullArgumentError
from dbcrypt.provider import AlgorithmProvider
from dbcrypt.wrapped import EncryptedString

logger = logging.getLogger(__name__)


class EncryptedStringCodec:
    """Encrypts :class:`EncryptedString` values for storage and decrypts them on read.

    Null and blank values are never run through the cipher: ``None`` maps to
    ``None`` and empty or whitespace-only strings pass through unchanged in
    both directions.

    Usage:
        codec = EncryptedStringCodec(SymmetricAlgorithmProvider.from_env())

        token = codec.encode(wrap("555-0100"))
        value = codec.decode(token)
    """

    def __init__(self, algorithm_provider: AlgorithmProvider) -> None:
        if algorithm_provider is None:
            raise NullArgumentError("algorithm_provider")
        self._algorithm_provider = algorithm_provider

    def can_handle(self, type_: type) -> bool:
        """Return True only for :class:`EncryptedString`."""
        if type_ is None:
            raise NullArgumentError("type_")
        return type_ is EncryptedString

    def decode(self, value: str | None) -> EncryptedString | None:
        """Convert a stored column value into an :class:`EncryptedString`.

        Raises:
            MalformedTokenError: If the value has no ``@`` separator.
            InvalidEncodingError: If either segment is not valid base64.
            DecryptionFailedError: If the cipher rejects the token.
        """
        if value is None:
            return None
        if not isinstance(value, str):
            raise TypeError(f"Expected a str column value, got {type(value).__name__}")
        if not value.strip():
            return EncryptedString(value)
        return EncryptedString(self.decrypt(value))

    def decode_row(self, row: Sequence[object], index: int) -> EncryptedString | None:
        """Decode the value at *index* of a result row."""
        if row is None:
            raise NullArgumentError("row")
        return self.decode(row[index])  # type: ignore[arg-type]

    def encode(self, value: EncryptedString | str | None) -> str | None:
        """Convert a value into the string to store.

        Returns None for None and the string form unchanged when it is empty
        or whitespace-only; anything else is encrypted into a token.
        """
        if value is None:
            return None
        text = str(value)
        if not text.strip():
            return text
        return self.encrypt(text)

    def encrypt(self, clear_text: str) -> str:
        """Encrypt *clear_text* under a fresh random IV and return the token."""
        with self._algorithm_provider.create_algorithm() as algorithm, io.BytesIO() as buffer:
            # Always a new IV, even when re-encrypting a value that already has one.
            algorithm.generate_iv()
            iv_bytes = algorithm.iv
            encryptor = algorithm.create_encryptor()
            buffer.write(encryptor.update(clear_text.encode(TEXT_ENCODING)))
            buffer.write(encryptor.finalize())
            cipher_bytes = buffer.getvalue()

        cipher_segment = base64.b64encode(cipher_bytes).decode("ascii")
        iv_segment = base64.b64encode(iv_bytes).decode("ascii")
        return f"{cipher_segment}{TOKEN_SEPARATOR}{iv_segment}"

    def decrypt(self, cipher_text: str) -> str:
        """Decrypt a token produced by :meth:`encrypt`.

        Raises:
            MalformedTokenError: If the token has no ``@`` separator.
            InvalidEncodingError: If either segment is not valid base64.
            DecryptionFailedError: If the key, IV or cipher bytes are rejected,
                or the result is not valid UTF-8.
        """
        cipher_bytes, iv_bytes = _split_token(cipher_text)

        try:
            with (
                self._algorithm_provider.create_algorithm() as algorithm,
                io.BytesIO(cipher_bytes) as source,
                io.BytesIO() as sink,
            ):
                algorithm.iv = iv_bytes
                decryptor = algorithm.create_decryptor()
                read_chunk = functools.partial(source.read, algorithm.block_size * DECRYPT_CHUNK_BLOCKS)
                for chunk in iter(read_chunk, b""):
                    sink.write(decryptor.update(chunk))
                sink.write(decryptor.finalize())
                clear_bytes = sink.getvalue()
            return clear_bytes.decode(TEXT_ENCODING)
        except ValueError as exc:
            logger.warning("Decryption failed: %s", type(exc).__name__)
            raise DecryptionFailedError("The cipher text could not be decrypted with the configured key") from exc


def _split_token(cipher_text: str) -> tuple[bytes, bytes]:
    index = cipher_text.find(TOKEN_SEPARATOR)
    if index == -1:
        logger.warning("Stored value is not an encrypted token")
        raise MalformedTokenError(MALFORMED_TOKEN_MESSAGE)

    return _b64decode(cipher_text[:index], "cipher"), _b64decode(cipher_text[index + 1 :], "iv")


def _b64decode(segment: str, name: str) -> bytes:
    try:
        return base64.b64decode(segment, validate=True)
    except ValueError as exc:  # binascii.Error, or non-ASCII input
        logger.warning("Invalid base64 in %s segment of token", name)
        raise InvalidEncodingError(name) from exc
