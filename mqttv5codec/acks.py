"""PUBACK, PUBREC, PUBREL and PUBCOMP packets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .buffer import BuffReader, BuffWriter, encode_variable_byte_int, variable_byte_int_len
from .packet import Packet, PacketType
from .property import Property
from .types import BufferError, BufferErrorKind


@dataclass
class _AckPacket(Packet):
    """Packet identifier, reason code and properties, as in every QoS acknowledgement."""

    packet_type: ClassVar[PacketType] = PacketType.RESERVED

    packet_identifier: int = 0
    reason_code: int = 0

    def _encode_ack(self, buffer_len: int) -> bytes:
        writer = BuffWriter(buffer_len)
        prop_len_len = variable_byte_int_len(encode_variable_byte_int(self.property_len))
        remaining = self.property_len + prop_len_len + 3

        writer.write_u8(self.fixed_header)
        writer.write_variable_byte_int(remaining)
        writer.write_u16(self.packet_identifier)
        writer.write_u8(self.reason_code)
        writer.write_variable_byte_int(self.property_len)
        writer.write_properties(self.properties)
        return writer.getvalue()

    def _check_type(self, reader: BuffReader) -> None:
        if self.decode_fixed_header(reader) is not self.packet_type:
            raise BufferError(BufferErrorKind.PACKET_TYPE_MISMATCH)

    def _decode_ack(self, reader: BuffReader) -> None:
        self._check_type(reader)
        self.packet_identifier = reader.read_u16()
        self.reason_code = reader.read_u8()
        self.decode_properties(reader)


@dataclass
class PubackPacket(_AckPacket):
    """Acknowledgement of a QoS 1 PUBLISH."""

    packet_type: ClassVar[PacketType] = PacketType.PUBACK

    fixed_header: int = int(PacketType.PUBACK)

    def encode(self, buffer_len: int) -> bytes:
        """Encode into at most `buffer_len` bytes and return them."""
        return self._encode_ack(buffer_len)

    def decode(self, reader: BuffReader) -> None:
        """Decode; the reason code and properties may be left out."""
        self._check_type(reader)
        self.packet_identifier = reader.read_u16()
        if self.remain_len != 2:
            self.reason_code = reader.read_u8()
        if self.remain_len < 4:
            self.property_len = 0
        else:
            self.decode_properties(reader)

    def property_allowed(self, prop: Property) -> bool:
        return prop.puback_property()


@dataclass
class PubcompPacket(_AckPacket):
    """Last packet of the QoS 2 exchange."""

    packet_type: ClassVar[PacketType] = PacketType.PUBCOMP

    fixed_header: int = int(PacketType.PUBCOMP)

    def encode(self, buffer_len: int) -> bytes:
        """Encode into at most `buffer_len` bytes and return them."""
        return self._encode_ack(buffer_len)

    def decode(self, reader: BuffReader) -> None:
        self._decode_ack(reader)

    def property_allowed(self, prop: Property) -> bool:
        return prop.pubcomp_property()


@dataclass
class PubrecPacket(_AckPacket):
    """First acknowledgement of a QoS 2 PUBLISH."""

    packet_type: ClassVar[PacketType] = PacketType.PUBREC

    fixed_header: int = int(PacketType.PUBREC)

    def encode(self, buffer_len: int) -> bytes:
        """Encode into at most `buffer_len` bytes and return them."""
        return self._encode_ack(buffer_len)

    def decode(self, reader: BuffReader) -> None:
        self._decode_ack(reader)

    def property_allowed(self, prop: Property) -> bool:
        return prop.pubrec_property()


@dataclass
class PubrelPacket(_AckPacket):
    """Release of a QoS 2 PUBLISH; the header byte starts at 0 until set."""

    packet_type: ClassVar[PacketType] = PacketType.PUBREL

    def encode(self, buffer_len: int) -> bytes:
        """Encode into at most `buffer_len` bytes and return them."""
        return self._encode_ack(buffer_len)

    def decode(self, reader: BuffReader) -> None:
        self._decode_ack(reader)

    def property_allowed(self, prop: Property) -> bool:
        return prop.pubrel_property()