"""Registry of value converters consulted when reading and writing columns."""

import logging
from typing import Any, Protocol

from sqlalchemy import String
from sqlalchemy.types import TypeEngine

from dbcrypt.codec import EncryptedStringCodec
from dbcrypt.exceptions import NullArgumentError
from dbcrypt.wrapped import EncryptedString

logger = logging.getLogger(__name__)


class ValueConverter(Protocol):
    """Converts between a Python type and its stored column value."""

    def can_handle(self, type_: type) -> bool: ...

    def decode(self, value: Any) -> Any: ...

    def encode(self, value: Any) -> Any: ...


class ConverterRegistry:
    """Ordered value converters plus Python type -> column type mappings.

    Converters are consulted in registration order; the first whose
    ``can_handle`` accepts the type wins. Types with no converter pass
    through unchanged.
    """

    def __init__(self) -> None:
        self._converters: list[ValueConverter] = []
        self._type_mappings: dict[type, TypeEngine[Any]] = {}

    def register(self, converter: ValueConverter) -> None:
        if converter is None:
            raise NullArgumentError("converter")
        self._converters.append(converter)
        logger.debug("Registered value converter %s", type(converter).__name__)

    def register_type_mapping(self, python_type: type, column_type: TypeEngine[Any]) -> None:
        if python_type is None:
            raise NullArgumentError("python_type")
        if column_type is None:
            raise NullArgumentError("column_type")
        self._type_mappings[python_type] = column_type
        logger.debug("Mapped %s to %s", python_type.__name__, column_type)

    def converter_for(self, type_: type) -> ValueConverter | None:
        for converter in self._converters:
            if converter.can_handle(type_):
                return converter
        return None

    def column_type_for(self, python_type: type) -> TypeEngine[Any] | None:
        return self._type_mappings.get(python_type)

    def to_db_value(self, value: Any, type_: type) -> Any:
        converter = self.converter_for(type_)
        return value if converter is None else converter.encode(value)

    def from_db_value(self, value: Any, type_: type) -> Any:
        converter = self.converter_for(type_)
        return value if converter is None else converter.decode(value)


def register_encrypted_string(registry: ConverterRegistry, codec: EncryptedStringCodec) -> None:
    """Register *codec* for :class:`EncryptedString` and map the type to a string column.

    Call once from application bootstrap code.
    """
    if registry is None:
        raise NullArgumentError("registry")
    if codec is None:
        raise NullArgumentError("codec")
    registry.register(codec)
    registry.register_type_mapping(EncryptedString, String())
