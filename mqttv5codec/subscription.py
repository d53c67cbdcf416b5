"""SUBSCRIBE and UNSUBSCRIBE packets."""

from __future__ import annotations

from dataclasses import dataclass, field

from .buffer import BuffReader, BuffWriter, encode_variable_byte_int, variable_byte_int_len
from .packet import Packet, PacketType
from .property import Property
from .publish import QualityOfService
from .types import BufferError, BufferErrorKind, EncodedString, TopicFilter


@dataclass
class _FilterPacket(Packet):
    """Packet identifier, properties and a list of topic filters."""

    packet_identifier: int = 0
    topic_filters: list[TopicFilter] = field(default_factory=list)
    max_filters: int | None = None

    @property
    def topic_filter_len(self) -> int:
        return len(self.topic_filters)

    def _push_filter(self, topic_filter: TopicFilter) -> None:
        if self.max_filters is not None and len(self.topic_filters) >= self.max_filters:
            raise ValueError(f"at most {self.max_filters} topic filters are allowed")
        self.topic_filters.append(topic_filter)

    def _encode_filters(self, buffer_len: int, sub: bool, filter_overhead: int) -> bytes:
        if not self.topic_filters:
            raise BufferError(BufferErrorKind.ENCODING_ERROR)
        writer = BuffWriter(buffer_len)
        prop_len_len = variable_byte_int_len(encode_variable_byte_int(self.property_len))
        filters_len = sum(f.filter.length + filter_overhead for f in self.topic_filters)
        remaining = self.property_len + prop_len_len + 2 + filters_len

        writer.write_u8(self.fixed_header)
        writer.write_variable_byte_int(remaining)
        writer.write_u16(self.packet_identifier)
        writer.write_variable_byte_int(self.property_len)
        writer.write_properties(self.properties)
        writer.write_topic_filters_ref(sub, self.topic_filter_len, self.topic_filters)
        return writer.getvalue()


@dataclass
class SubscriptionPacket(_FilterPacket):
    """Request to subscribe to one or more topic filters."""

    fixed_header: int = int(PacketType.SUBSCRIBE)
    packet_identifier: int = 1

    def add_new_filter(self, topic_name: str, qos: QualityOfService) -> None:
        self._push_filter(TopicFilter(EncodedString(topic_name), qos.to_byte() >> 1))

    def encode(self, buffer_len: int) -> bytes:
        """Encode into at most `buffer_len` bytes; at least one filter is required."""
        return self._encode_filters(buffer_len, True, 3)

    def decode(self, reader: BuffReader) -> None:
        """A client only sends this packet; it is never decoded."""
        raise BufferError(BufferErrorKind.WRONG_PACKET_TO_DECODE)

    def property_allowed(self, prop: Property) -> bool:
        return prop.subscribe_property()


@dataclass
class UnsubscriptionPacket(_FilterPacket):
    """Request to unsubscribe from one or more topic filters."""

    fixed_header: int = int(PacketType.UNSUBSCRIBE)

    def add_new_filter(self, topic_name: str) -> None:
        self._push_filter(TopicFilter(EncodedString(topic_name), 0x01))

    def encode(self, buffer_len: int) -> bytes:
        """Encode into at most `buffer_len` bytes; at least one filter is required."""
        return self._encode_filters(buffer_len, False, 2)

    def decode(self, reader: BuffReader) -> None:
        """A client only sends this packet; it is never decoded."""
        raise BufferError(BufferErrorKind.WRONG_PACKET_TO_DECODE)

    def property_allowed(self, prop: Property) -> bool:
        return prop.unsubscribe_property()