"""PUBLISH packet and quality-of-service levels."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .buffer import BuffReader, BuffWriter, encode_variable_byte_int, variable_byte_int_len
from .packet import Packet, PacketType
from .property import Property
from .types import BufferError, BufferErrorKind, EncodedString

_QOS_MASK = 0x06


class QualityOfService(Enum):
    """QoS levels, valued as their bits in the PUBLISH fixed header."""

    QOS0 = 0
    QOS1 = 2
    QOS2 = 4
    INVALID = 3

    @classmethod
    def from_byte(cls, value: int) -> QualityOfService:
        """Map header QoS bits (0, 2 or 4) to a level; anything else is INVALID."""
        if value in (0, 2, 4):
            return cls(value)
        return cls.INVALID

    def to_byte(self) -> int:
        return self.value


@dataclass
class PublishPacket(Packet):
    """An application message sent to a topic."""

    fixed_header: int = int(PacketType.PUBLISH)
    topic_name: EncodedString = field(default_factory=EncodedString)
    packet_identifier: int = 1
    message: bytes | None = None

    def add_topic_name(self, topic_name: str) -> None:
        self.topic_name = EncodedString(topic_name)

    def add_message(self, message: bytes) -> None:
        self.message = bytes(message)

    def add_qos(self, qos: QualityOfService) -> None:
        self.fixed_header |= qos.to_byte()

    def add_retain(self, retain: bool) -> None:
        self.fixed_header |= int(bool(retain))

    def add_identifier(self, identifier: int) -> None:
        self.packet_identifier = identifier

    def encode(self, buffer_len: int) -> bytes:
        """Encode into at most `buffer_len` bytes; a message must have been set."""
        if self.message is None:
            raise BufferError(BufferErrorKind.ENCODING_ERROR)
        writer = BuffWriter(buffer_len)
        prop_len_len = variable_byte_int_len(encode_variable_byte_int(self.property_len))
        msg_len = len(self.message)
        remaining = self.property_len + prop_len_len + msg_len + self.topic_name.length + 2

        writer.write_u8(self.fixed_header)
        qos = self.fixed_header & _QOS_MASK
        if qos:
            remaining += 2

        writer.write_variable_byte_int(remaining)
        writer.write_string_ref(self.topic_name)
        if qos:
            writer.write_u16(self.packet_identifier)
        writer.write_variable_byte_int(self.property_len)
        writer.write_properties(self.properties)
        writer.insert_ref(msg_len, self.message)
        return writer.getvalue()

    def decode(self, reader: BuffReader) -> None:
        if self.decode_fixed_header(reader) is not PacketType.PUBLISH:
            raise BufferError(BufferErrorKind.PACKET_TYPE_MISMATCH)
        self.topic_name = reader.read_string()
        if self.fixed_header & _QOS_MASK:
            self.packet_identifier = reader.read_u16()
        self.decode_properties(reader)
        rem_len_len = variable_byte_int_len(encode_variable_byte_int(self.remain_len))
        total_len = rem_len_len + 1 + self.remain_len
        self.message = reader.read_message(total_len)

    def property_allowed(self, prop: Property) -> bool:
        return prop.publish_property()