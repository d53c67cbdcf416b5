"""SUBACK and UNSUBACK packets."""

from __future__ import annotations

from dataclasses import dataclass, field

from .buffer import BuffReader, encode_variable_byte_int, variable_byte_int_len
from .packet import Packet, PacketType
from .property import Property
from .types import BufferError, BufferErrorKind


@dataclass
class _ReasonListPacket(Packet):
    """Packet identifier, properties and a list of reason codes.

    ``max_reasons`` bounds how many reason codes are kept; ``None`` means
    no bound.
    """

    packet_identifier: int = 0
    reason_codes: list[int] = field(default_factory=list)
    max_reasons: int | None = None

    def _push_reason(self, code: int) -> None:
        if self.max_reasons is None or len(self.reason_codes) < self.max_reasons:
            self.reason_codes.append(code)

    def _packet_end(self) -> int:
        """Reader position just past the end of this packet."""
        rem_len_len = variable_byte_int_len(encode_variable_byte_int(self.remain_len))
        return self.remain_len + rem_len_len + 1

    def _decode_head(self, reader: BuffReader, packet_type: PacketType) -> None:
        if self.decode_fixed_header(reader) is not packet_type:
            raise BufferError(BufferErrorKind.PACKET_TYPE_MISMATCH)
        self.packet_identifier = reader.read_u16()
        self.decode_properties(reader)


@dataclass
class SubackPacket(_ReasonListPacket):
    """Broker's answer to a SUBSCRIBE: one reason code per topic filter."""

    fixed_header: int = int(PacketType.SUBACK)

    def read_reason_codes(self, reader: BuffReader) -> None:
        """Read reason codes up to the end of the packet."""
        end = self._packet_end()
        while reader.position < end:
            self._push_reason(reader.read_u8())

    def encode(self, buffer_len: int) -> bytes:
        """A client only receives this packet; it is never encoded."""
        raise BufferError(BufferErrorKind.WRONG_PACKET_TO_ENCODE)

    def decode(self, reader: BuffReader) -> None:
        self._decode_head(reader, PacketType.SUBACK)
        self.read_reason_codes(reader)

    def property_allowed(self, prop: Property) -> bool:
        return prop.suback_property()


@dataclass
class UnsubackPacket(_ReasonListPacket):
    """Broker's answer to an UNSUBSCRIBE: one reason code per topic filter.

    With ``max_reasons`` set, exactly that many reason codes are read;
    otherwise codes are read up to the end of the packet.
    """

    fixed_header: int = int(PacketType.UNSUBACK)

    def read_reason_codes(self, reader: BuffReader) -> None:
        if self.max_reasons is None:
            end = self._packet_end()
            while reader.position < end:
                self.reason_codes.append(reader.read_u8())
            return
        for _ in range(self.max_reasons):
            self._push_reason(reader.read_u8())

    def encode(self, buffer_len: int) -> bytes:
        """A client only receives this packet; it is never encoded."""
        raise BufferError(BufferErrorKind.WRONG_PACKET_TO_ENCODE)

    def decode(self, reader: BuffReader) -> None:
        self._decode_head(reader, PacketType.UNSUBACK)
        self.read_reason_codes(reader)

    def property_allowed(self, prop: Property) -> bool:
        return prop.unsuback_property()