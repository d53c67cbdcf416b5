import pytest

from mqttv5codec.buffer import BuffReader
from mqttv5codec.packet import PacketType
from mqttv5codec.property import Property, PropertyId
from mqttv5codec.publish import PublishPacket, QualityOfService
from mqttv5codec.types import BufferError, BufferErrorKind, EncodedString

MESSAGE = bytes([0x48, 0x65, 0x6C, 0x6C, 0x6F, 0x20, 0x77, 0x6F, 0x72, 0x6C, 0x64])

ENCODED = bytes([
    0x32, 0x1B, 0x00, 0x04, 0x74, 0x65, 0x73, 0x74, 0x5B, 0x88, 0x07, 0x01, 0x01, 0x02,
    0x00, 0x00, 0xB2, 0x6E, 0x48, 0x65, 0x6C, 0x6C, 0x6F, 0x20, 0x77, 0x6F, 0x72, 0x6C,
    0x64,
])


def test_encode():
    packet = PublishPacket(max_properties=2)
    packet.fixed_header = int(PacketType.PUBLISH)
    packet.add_qos(QualityOfService.QOS1)
    packet.topic_name = EncodedString("test")
    packet.packet_identifier = 23432
    props = [
        Property(PropertyId.PAYLOAD_FORMAT, 0x01),
        Property(PropertyId.MESSAGE_EXPIRY_INTERVAL, 45678),
    ]
    packet.property_len = packet.add_properties(props)
    packet.add_message(MESSAGE)
    res = packet.encode(100)
    assert len(res) == 29
    assert res == ENCODED


def test_decode():
    packet = PublishPacket(max_properties=2)
    packet.decode(BuffReader(ENCODED, 29))
    assert packet.fixed_header == 0x32
    assert packet.topic_name.length == 4
    assert packet.topic_name.string == "test"
    assert packet.packet_identifier == 23432
    assert packet.property_len == 7
    assert packet.properties[0].identifier() == 0x01
    assert packet.properties[0].value == 0x01
    assert packet.properties[1].identifier() == 0x02
    assert packet.properties[1].value == 45678
    assert packet.message == MESSAGE


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, QualityOfService.QOS0),
        (2, QualityOfService.QOS1),
        (4, QualityOfService.QOS2),
        (1, QualityOfService.INVALID),
        (3, QualityOfService.INVALID),
        (6, QualityOfService.INVALID),
    ],
)
def test_qos_from_byte(value, expected):
    assert QualityOfService.from_byte(value) is expected


@pytest.mark.parametrize(
    "qos, expected",
    [
        (QualityOfService.QOS0, 0),
        (QualityOfService.QOS1, 2),
        (QualityOfService.QOS2, 4),
        (QualityOfService.INVALID, 3),
    ],
)
def test_qos_to_byte(qos, expected):
    assert qos.to_byte() == expected


def test_qos0_encode_has_no_identifier():
    packet = PublishPacket()
    packet.add_topic_name("a/b")
    packet.add_message(b"hi")
    assert packet.encode(50) == bytes(
        [0x30, 0x08, 0x00, 0x03, 0x61, 0x2F, 0x62, 0x00, 0x68, 0x69]
    )


def test_qos0_round_trip():
    packet = PublishPacket()
    packet.add_topic_name("a/b")
    packet.add_message(b"hi")
    data = packet.encode(50)
    decoded = PublishPacket()
    decoded.decode(BuffReader(data))
    assert decoded.topic_name.string == "a/b"
    assert decoded.message == b"hi"
    assert decoded.packet_identifier == 1
    assert decoded.remain_len == 8


def test_add_retain_sets_low_bit():
    packet = PublishPacket()
    packet.add_retain(True)
    assert packet.fixed_header == 0x31


def test_add_identifier():
    packet = PublishPacket()
    packet.add_identifier(77)
    assert packet.packet_identifier == 77


def test_disallowed_property_is_not_added():
    packet = PublishPacket()
    length = packet.add_properties([Property(PropertyId.REASON_STRING, "nope")])
    assert length == 0
    assert packet.properties == []


def test_encode_without_message_raises():
    packet = PublishPacket()
    packet.add_topic_name("t")
    with pytest.raises(BufferError) as info:
        packet.encode(50)
    assert info.value.kind is BufferErrorKind.ENCODING_ERROR


def test_encode_buffer_too_small():
    packet = PublishPacket()
    packet.add_topic_name("topic")
    packet.add_message(b"payload")
    with pytest.raises(BufferError) as info:
        packet.encode(5)
    assert info.value.kind is BufferErrorKind.INSUFFICIENT_BUFFER_SIZE


def test_decode_wrong_type():
    packet = PublishPacket()
    with pytest.raises(BufferError) as info:
        packet.decode(BuffReader(bytes([0x40, 0x02, 0x00, 0x01])))
    assert info.value.kind is BufferErrorKind.PACKET_TYPE_MISMATCH