"""MQTT v5 properties: identifiers, wire encoding and per-packet validity."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, NamedTuple

from .buffer import BuffReader, BuffWriter, encode_variable_byte_int, variable_byte_int_len
from .types import BinaryData, BufferError, BufferErrorKind, EncodedString, StringPair


class PropertyId(IntEnum):
    """Identifier byte that precedes each property on the wire."""

    RESERVED = 0x00
    PAYLOAD_FORMAT = 0x01
    MESSAGE_EXPIRY_INTERVAL = 0x02
    CONTENT_TYPE = 0x03
    RESPONSE_TOPIC = 0x08
    CORRELATION_DATA = 0x09
    SUBSCRIPTION_IDENTIFIER = 0x0B
    SESSION_EXPIRY_INTERVAL = 0x11
    ASSIGNED_CLIENT_IDENTIFIER = 0x12
    SERVER_KEEP_ALIVE = 0x13
    AUTHENTICATION_METHOD = 0x15
    AUTHENTICATION_DATA = 0x16
    REQUEST_PROBLEM_INFORMATION = 0x17
    WILL_DELAY_INTERVAL = 0x18
    REQUEST_RESPONSE_INFORMATION = 0x19
    RESPONSE_INFORMATION = 0x1A
    SERVER_REFERENCE = 0x1C
    REASON_STRING = 0x1F
    RECEIVE_MAXIMUM = 0x21
    TOPIC_ALIAS_MAXIMUM = 0x22
    TOPIC_ALIAS = 0x23
    MAXIMUM_QOS = 0x24
    RETAIN_AVAILABLE = 0x25
    USER_PROPERTY = 0x26
    MAXIMUM_PACKET_SIZE = 0x27
    WILDCARD_SUBSCRIPTION_AVAILABLE = 0x28
    SUBSCRIPTION_IDENTIFIER_AVAILABLE = 0x29
    SHARED_SUBSCRIPTION_AVAILABLE = 0x2A


class _Codec(NamedTuple):
    read: Callable[[BuffReader], Any]
    write: Callable[[BuffWriter, Any], None]
    length: Callable[[Any], int]


_U8 = _Codec(BuffReader.read_u8, BuffWriter.write_u8, lambda _v: 1)
_U16 = _Codec(BuffReader.read_u16, BuffWriter.write_u16, lambda _v: 2)
_U32 = _Codec(BuffReader.read_u32, BuffWriter.write_u32, lambda _v: 4)
_VBI = _Codec(
    BuffReader.read_variable_byte_int,
    BuffWriter.write_variable_byte_int,
    lambda v: variable_byte_int_len(encode_variable_byte_int(v)),
)
_STRING = _Codec(BuffReader.read_string, BuffWriter.write_string_ref, lambda v: v.encoded_len())
_BINARY = _Codec(BuffReader.read_binary, BuffWriter.write_binary_ref, lambda v: v.encoded_len())
_PAIR = _Codec(
    BuffReader.read_string_pair, BuffWriter.write_string_pair_ref, lambda v: v.encoded_len()
)

_CODECS: dict[PropertyId, _Codec] = {
    PropertyId.PAYLOAD_FORMAT: _U8,
    PropertyId.MESSAGE_EXPIRY_INTERVAL: _U32,
    PropertyId.CONTENT_TYPE: _STRING,
    PropertyId.RESPONSE_TOPIC: _STRING,
    PropertyId.CORRELATION_DATA: _BINARY,
    PropertyId.SUBSCRIPTION_IDENTIFIER: _VBI,
    PropertyId.SESSION_EXPIRY_INTERVAL: _U32,
    PropertyId.ASSIGNED_CLIENT_IDENTIFIER: _STRING,
    PropertyId.SERVER_KEEP_ALIVE: _U16,
    PropertyId.AUTHENTICATION_METHOD: _STRING,
    PropertyId.AUTHENTICATION_DATA: _BINARY,
    PropertyId.REQUEST_PROBLEM_INFORMATION: _U8,
    PropertyId.WILL_DELAY_INTERVAL: _U32,
    PropertyId.REQUEST_RESPONSE_INFORMATION: _U8,
    PropertyId.RESPONSE_INFORMATION: _STRING,
    PropertyId.SERVER_REFERENCE: _STRING,
    PropertyId.REASON_STRING: _STRING,
    PropertyId.RECEIVE_MAXIMUM: _U16,
    PropertyId.TOPIC_ALIAS_MAXIMUM: _U16,
    PropertyId.TOPIC_ALIAS: _U16,
    PropertyId.MAXIMUM_QOS: _U8,
    PropertyId.RETAIN_AVAILABLE: _U8,
    PropertyId.USER_PROPERTY: _PAIR,
    PropertyId.MAXIMUM_PACKET_SIZE: _U32,
    PropertyId.WILDCARD_SUBSCRIPTION_AVAILABLE: _U8,
    PropertyId.SUBSCRIPTION_IDENTIFIER_AVAILABLE: _U8,
    PropertyId.SHARED_SUBSCRIPTION_AVAILABLE: _U8,
}

_P = PropertyId
_CONNECT = frozenset({
    _P.SESSION_EXPIRY_INTERVAL, _P.RECEIVE_MAXIMUM, _P.MAXIMUM_PACKET_SIZE,
    _P.TOPIC_ALIAS_MAXIMUM, _P.REQUEST_RESPONSE_INFORMATION, _P.REQUEST_PROBLEM_INFORMATION,
    _P.USER_PROPERTY, _P.AUTHENTICATION_METHOD, _P.AUTHENTICATION_DATA,
})
_CONNACK = frozenset({
    _P.SESSION_EXPIRY_INTERVAL, _P.RECEIVE_MAXIMUM, _P.MAXIMUM_QOS, _P.MAXIMUM_PACKET_SIZE,
    _P.ASSIGNED_CLIENT_IDENTIFIER, _P.TOPIC_ALIAS_MAXIMUM, _P.REASON_STRING, _P.USER_PROPERTY,
    _P.WILDCARD_SUBSCRIPTION_AVAILABLE, _P.SUBSCRIPTION_IDENTIFIER_AVAILABLE,
    _P.SHARED_SUBSCRIPTION_AVAILABLE, _P.SERVER_KEEP_ALIVE, _P.RESPONSE_INFORMATION,
    _P.SERVER_REFERENCE, _P.AUTHENTICATION_METHOD, _P.AUTHENTICATION_DATA,
})
_PUBLISH = frozenset({
    _P.PAYLOAD_FORMAT, _P.MESSAGE_EXPIRY_INTERVAL, _P.TOPIC_ALIAS, _P.RESPONSE_TOPIC,
    _P.CORRELATION_DATA, _P.USER_PROPERTY, _P.SUBSCRIPTION_IDENTIFIER, _P.CONTENT_TYPE,
})
_REASON_AND_USER = frozenset({_P.REASON_STRING, _P.USER_PROPERTY})
_SUBSCRIBE = frozenset({_P.SUBSCRIPTION_IDENTIFIER, _P.USER_PROPERTY})
_UNSUBSCRIBE = frozenset({_P.USER_PROPERTY})
_DISCONNECT = frozenset({
    _P.SESSION_EXPIRY_INTERVAL, _P.REASON_STRING, _P.USER_PROPERTY, _P.SERVER_REFERENCE,
})
_AUTH = frozenset({
    _P.AUTHENTICATION_METHOD, _P.AUTHENTICATION_DATA, _P.REASON_STRING, _P.USER_PROPERTY,
})


def _coerce(codec: _Codec | None, value: Any) -> Any:
    if codec is _STRING and isinstance(value, str):
        return EncodedString(value)
    if codec is _BINARY and isinstance(value, (bytes, bytearray, memoryview)):
        return BinaryData(bytes(value))
    if codec is _PAIR and isinstance(value, tuple):
        name, val = value
        return StringPair(_coerce(_STRING, name), _coerce(_STRING, val))
    return value


@dataclass(frozen=True)
class Property:
    """A single MQTT v5 property: its identifier and its value.

    String values may be given as ``str``, binary values as ``bytes`` and
    user properties as a ``(name, value)`` tuple; they are converted.
    """

    property_id: PropertyId
    value: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "property_id", PropertyId(self.property_id))
        codec = _CODECS.get(self.property_id)
        object.__setattr__(self, "value", _coerce(codec, self.value))

    def identifier(self) -> PropertyId:
        return self.property_id

    def connect_property(self) -> bool:
        return self.property_id in _CONNECT

    def connack_property(self) -> bool:
        return self.property_id in _CONNACK

    def publish_property(self) -> bool:
        return self.property_id in _PUBLISH

    def puback_property(self) -> bool:
        return self.property_id in _REASON_AND_USER

    def pubrec_property(self) -> bool:
        return self.property_id in _REASON_AND_USER

    def pubrel_property(self) -> bool:
        return self.property_id in _REASON_AND_USER

    def pubcomp_property(self) -> bool:
        return self.property_id in _REASON_AND_USER

    def subscribe_property(self) -> bool:
        return self.property_id in _SUBSCRIBE

    def suback_property(self) -> bool:
        return self.property_id in _REASON_AND_USER

    def unsubscribe_property(self) -> bool:
        return self.property_id in _UNSUBSCRIBE

    def unsuback_property(self) -> bool:
        return self.property_id in _REASON_AND_USER

    def pingreq_property(self) -> bool:
        """PINGREQ carries no properties."""
        return False

    def pingresp_property(self) -> bool:
        """PINGRESP carries no properties."""
        return False

    def disconnect_property(self) -> bool:
        return self.property_id in _DISCONNECT

    def auth_property(self) -> bool:
        return self.property_id in _AUTH

    def encoded_len(self) -> int:
        """Wire length of the value, without the identifier byte."""
        codec = _CODECS.get(self.property_id)
        return 0 if codec is None else codec.length(self.value)

    def encode(self, writer: BuffWriter) -> None:
        """Write the value (not the identifier byte) to `writer`."""
        codec = _CODECS.get(self.property_id)
        if codec is None:
            raise BufferError(BufferErrorKind.PROPERTY_NOT_FOUND)
        codec.write(writer, self.value)

    @classmethod
    def decode(cls, reader: BuffReader) -> Property:
        """Read an identifier byte and the value that follows it."""
        ident = reader.read_u8()
        try:
            property_id = PropertyId(ident)
        except ValueError:
            raise BufferError(BufferErrorKind.ID_NOT_FOUND) from None
        codec = _CODECS.get(property_id)
        if codec is None:
            raise BufferError(BufferErrorKind.ID_NOT_FOUND)
        return cls(property_id, codec.read(reader))