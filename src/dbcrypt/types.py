"""SQLAlchemy column type that stores EncryptedString values as tokens."""

from typing import Any

from sqlalchemy import String, TypeDecorator
from sqlalchemy.engine import Dialect

from dbcrypt.codec import EncryptedStringCodec
from dbcrypt.exceptions import NullArgumentError
from dbcrypt.wrapped import EncryptedString


class EncryptedStringType(TypeDecorator[EncryptedString]):
    """Encrypts on write, decrypts on read.

    Usage in models:
        codec = EncryptedStringCodec(provider)

        class Customer(Base):
            phone: Mapped[EncryptedString | None] = mapped_column(EncryptedStringType(codec))

    Tokens are longer than the clear text (base64 of padded cipher bytes plus
    the IV), so size ``length`` for the token, not the value. Tokens are not
    deterministic, so the column cannot be filtered by equality.
    """

    impl = String
    cache_ok = True

    def __init__(self, codec: EncryptedStringCodec, length: int | None = None, **kwargs: Any) -> None:
        if codec is None:
            raise NullArgumentError("codec")
        super().__init__(length, **kwargs)
        self.codec = codec

    @property
    def python_type(self) -> type[EncryptedString]:
        return EncryptedString

    def process_bind_param(self, value: EncryptedString | str | None, dialect: Dialect) -> str | None:
        return self.codec.encode(value)

    def process_result_value(self, value: Any | None, dialect: Dialect) -> EncryptedString | None:
        return self.codec.decode(value)
