"""Packet types and the behaviour shared by every MQTT v5 control packet."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

from .buffer import BuffReader
from .property import Property


class PacketType(IntEnum):
    """Control packet types, valued as their default first header byte."""

    RESERVED = 0x00
    CONNECT = 0x10
    CONNACK = 0x20
    PUBLISH = 0x30
    PUBACK = 0x40
    PUBREC = 0x50
    PUBREL = 0x62
    PUBCOMP = 0x70
    SUBSCRIBE = 0x82
    SUBACK = 0x90
    UNSUBSCRIBE = 0xA2
    UNSUBACK = 0xB0
    PINGREQ = 0xC0
    PINGRESP = 0xD0
    DISCONNECT = 0xE0
    AUTH = 0xF0

    @classmethod
    def from_header(cls, header: int) -> PacketType:
        """Packet type named by the upper four bits of a fixed header byte."""
        return _BY_NIBBLE[(header & 0xF0) >> 4]


_BY_NIBBLE = {member.value >> 4: member for member in PacketType}


@dataclass
class Packet(ABC):
    """Fields and decoding steps common to all control packets.

    ``max_properties`` bounds how many properties are kept; properties
    beyond it are dropped. ``None`` means no bound.
    """

    fixed_header: int = 0
    remain_len: int = 0
    property_len: int = 0
    properties: list[Property] = field(default_factory=list)
    max_properties: int | None = None

    @abstractmethod
    def encode(self, buffer_len: int) -> bytes:
        """Encode the packet into at most `buffer_len` bytes."""

    @abstractmethod
    def decode(self, reader: BuffReader) -> None:
        """Fill the packet from `reader`."""

    @abstractmethod
    def property_allowed(self, prop: Property) -> bool:
        """Whether `prop` may be carried by this kind of packet."""

    def _push_property(self, prop: Property) -> None:
        if self.max_properties is None or len(self.properties) < self.max_properties:
            self.properties.append(prop)

    def decode_fixed_header(self, reader: BuffReader) -> PacketType:
        """Read the header byte and remaining length; return the packet type."""
        first_byte = reader.read_u8()
        self.fixed_header = first_byte
        self.remain_len = reader.read_variable_byte_int()
        return PacketType.from_header(first_byte)

    def decode_properties(self, reader: BuffReader) -> None:
        """Read the property length and then the properties it covers."""
        self.property_len = reader.read_variable_byte_int()
        consumed = 0
        while consumed < self.property_len:
            prop = Property.decode(reader)
            consumed += prop.encoded_len() + 1
            self._push_property(prop)

    def add_properties(self, properties: Iterable[Property]) -> int:
        """Add the allowed properties and return their total wire length."""
        total = 0
        for prop in properties:
            if self.property_allowed(prop):
                self._push_property(prop)
                total += prop.encoded_len() + 1
        return total