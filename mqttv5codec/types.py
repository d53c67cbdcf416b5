"""Primitive MQTT v5 data types and the error raised by the codec."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class BufferErrorKind(Enum):
    """Reasons a read, write, encode or decode can fail."""

    UTF8_ERROR = "Error encountered during UTF8 decoding!"
    INSUFFICIENT_BUFFER_SIZE = "Buffer size is not sufficient for packet!"
    VARIABLE_BYTE_INTEGER_ERROR = (
        "Error encountered during variable byte integer decoding / encoding!"
    )
    ID_NOT_FOUND = "Packet identifier not found!"
    ENCODING_ERROR = "Error encountered during packet encoding!"
    DECODING_ERROR = "Error encountered during packet decoding!"
    PACKET_TYPE_MISMATCH = (
        "Packet type not matched during decoding "
        "(Received different packet type than encode type)!"
    )
    WRONG_PACKET_TO_DECODE = (
        "Not able to decode packet, this packet is used just for sending "
        "to broker, not receiving by client!"
    )
    WRONG_PACKET_TO_ENCODE = (
        "Not able to encode packet, this packet is used only from server "
        "to client not the opposite way!"
    )
    PROPERTY_NOT_FOUND = "Property with ID not found!"

    @property
    def message(self) -> str:
        return self.value


class BufferError(Exception):
    """Raised when the codec cannot read, write, encode or decode data."""

    def __init__(self, kind: BufferErrorKind) -> None:
        super().__init__(kind.message)
        self.kind = kind

    def __str__(self) -> str:
        return self.kind.message

    def __repr__(self) -> str:
        return f"BufferError({self.kind.name})"


@dataclass(frozen=True)
class EncodedString:
    """A UTF-8 encoded string as carried in MQTT v5 packets."""

    string: str = ""

    @property
    def raw(self) -> bytes:
        return self.string.encode("utf-8")

    @property
    def length(self) -> int:
        """Length of the string in bytes, without the length prefix."""
        return len(self.raw)

    def encoded_len(self) -> int:
        """Length on the wire, including the two-byte length prefix."""
        return self.length + 2


@dataclass(frozen=True)
class BinaryData:
    """Binary data as carried in MQTT v5 packets."""

    bin: bytes = b""

    @property
    def length(self) -> int:
        return len(self.bin)

    def encoded_len(self) -> int:
        """Length on the wire, including the two-byte length prefix."""
        return self.length + 2


@dataclass(frozen=True)
class StringPair:
    """A name-value pair of UTF-8 encoded strings."""

    name: EncodedString = field(default_factory=EncodedString)
    value: EncodedString = field(default_factory=EncodedString)

    def encoded_len(self) -> int:
        """Sum of the wire lengths of both strings."""
        return self.name.encoded_len() + self.value.encoded_len()


@dataclass
class TopicFilter:
    """A topic filter together with its subscription options byte."""

    filter: EncodedString = field(default_factory=EncodedString)
    sub_options: int = 0

    def encoded_len(self) -> int:
        """Wire length of the filter string plus the options byte."""
        return self.filter.length + 3