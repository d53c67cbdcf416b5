import pytest

from mqttv5codec.buffer import BuffReader
from mqttv5codec.packet import PacketType
from mqttv5codec.property import Property, PropertyId
from mqttv5codec.suback import SubackPacket, UnsubackPacket
from mqttv5codec.types import BufferError, BufferErrorKind, EncodedString

SUBACK_BYTES = bytes([
    0x90, 0x15, 0xCC, 0x08, 0x0F, 0x1F, 0x00, 0x0C, 0x72, 0x65, 0x61, 0x73, 0x6F, 0x6E, 0x53,
    0x74, 0x72, 0x69, 0x6E, 0x67, 0x12, 0x34, 0x56,
])

UNSUBACK_BYTES = bytes([
    0xB0, 0x14, 0xCC, 0x08, 0x0F, 0x1F, 0x00, 0x0C, 0x72, 0x65, 0x61, 0x73, 0x6F, 0x6E, 0x53,
    0x74, 0x72, 0x69, 0x6E, 0x67, 0x77, 0x55,
])


def test_suback_decode():
    packet = SubackPacket(max_reasons=3, max_properties=1)
    packet.decode(BuffReader(SUBACK_BYTES, 23))
    assert packet.fixed_header == PacketType.SUBACK
    assert packet.remain_len == 21
    assert packet.packet_identifier == 52232
    assert packet.property_len == 15
    assert len(packet.properties) == 1
    prop = packet.properties[0]
    assert prop.identifier() == 0x1F
    assert prop.value == EncodedString("reasonString")
    assert prop.value.length == 12
    assert packet.reason_codes == [0x12, 0x34, 0x56]


def test_suback_decode_drops_reasons_over_bound():
    packet = SubackPacket(max_reasons=2)
    reader = BuffReader(SUBACK_BYTES)
    packet.decode(reader)
    assert packet.reason_codes == [0x12, 0x34]
    assert reader.position == len(SUBACK_BYTES)


def test_suback_decode_without_reason_codes():
    packet = SubackPacket()
    packet.decode(BuffReader(bytes([0x90, 0x03, 0x00, 0x01, 0x00])))
    assert packet.packet_identifier == 1
    assert packet.reason_codes == []


def test_suback_decode_truncated():
    packet = SubackPacket()
    with pytest.raises(BufferError) as info:
        packet.decode(BuffReader(bytes([0x90, 0x05, 0x00, 0x01, 0x00, 0x00])))
    assert info.value.kind is BufferErrorKind.INSUFFICIENT_BUFFER_SIZE


def test_suback_decode_type_mismatch():
    with pytest.raises(BufferError) as info:
        SubackPacket().decode(BuffReader(bytes([0x40, 0x02, 0x00, 0x01])))
    assert info.value.kind is BufferErrorKind.PACKET_TYPE_MISMATCH


def test_suback_encode_not_supported():
    with pytest.raises(BufferError) as info:
        SubackPacket().encode(100)
    assert info.value.kind is BufferErrorKind.WRONG_PACKET_TO_ENCODE


def test_suback_property_allowed():
    packet = SubackPacket()
    assert packet.property_allowed(Property(PropertyId.REASON_STRING, "x")) is True
    assert packet.property_allowed(Property(PropertyId.TOPIC_ALIAS, 3)) is False


def test_unsuback_decode():
    packet = UnsubackPacket(max_reasons=2, max_properties=1)
    packet.decode(BuffReader(UNSUBACK_BYTES, 22))
    assert packet.fixed_header == PacketType.UNSUBACK
    assert packet.remain_len == 20
    assert packet.packet_identifier == 52232
    assert packet.property_len == 15
    prop = packet.properties[0]
    assert prop.identifier() == 0x1F
    assert prop.value.string == "reasonString"
    assert prop.value.length == 12
    assert packet.reason_codes == [0x77, 0x55]


def test_unsuback_decode_unbounded_reads_to_end():
    packet = UnsubackPacket()
    reader = BuffReader(UNSUBACK_BYTES)
    packet.decode(reader)
    assert packet.reason_codes == [0x77, 0x55]
    assert reader.position == len(UNSUBACK_BYTES)


def test_unsuback_decode_expects_max_reasons():
    packet = UnsubackPacket(max_reasons=3)
    with pytest.raises(BufferError) as info:
        packet.decode(BuffReader(UNSUBACK_BYTES))
    assert info.value.kind is BufferErrorKind.INSUFFICIENT_BUFFER_SIZE


def test_unsuback_decode_type_mismatch():
    with pytest.raises(BufferError) as info:
        UnsubackPacket().decode(BuffReader(SUBACK_BYTES))
    assert info.value.kind is BufferErrorKind.PACKET_TYPE_MISMATCH


def test_unsuback_encode_not_supported():
    with pytest.raises(BufferError) as info:
        UnsubackPacket().encode(100)
    assert info.value.kind is BufferErrorKind.WRONG_PACKET_TO_ENCODE


def test_unsuback_property_allowed():
    packet = UnsubackPacket()
    assert packet.property_allowed(Property(PropertyId.USER_PROPERTY, ("a", "b"))) is True
    assert packet.property_allowed(Property(PropertyId.SUBSCRIPTION_IDENTIFIER, 5)) is False