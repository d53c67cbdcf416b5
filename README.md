# mqttv5codec

A small, dependency-free library for building and parsing MQTT version 5
control packets as raw bytes.

## What is in it

- `mqttv5codec.types`: the primitive value types `EncodedString`,
  `BinaryData`, `StringPair` and `TopicFilter`, each with `encoded_len()`,
  and the error `BufferError` with its `BufferErrorKind`.
- `mqttv5codec.buffer`: `BuffReader` and `BuffWriter`, which read and write
  big-endian integers, variable byte integers, length-prefixed strings,
  binary data, string pairs, properties and topic filters, plus the helpers
  `encode_variable_byte_int`, `decode_variable_byte_int` and
  `variable_byte_int_len`. `BuffWriter.get_rem_len()` raises `RemLenError`
  when the remaining-length field written so far is incomplete.
- `mqttv5codec.property`: `Property` and `PropertyId`. A property knows its
  wire length, encodes and decodes itself, and can tell in which packet types
  it is allowed (`publish_property()`, `puback_property()`, ...).
- `mqttv5codec.packet`: `PacketType` and the shared base class `Packet`
  (fixed header and property decoding, `add_properties`).
- Packets:
  - `mqttv5codec.publish`: `PublishPacket` and `QualityOfService`
  - `mqttv5codec.acks`: `PubackPacket`, `PubrecPacket`, `PubrelPacket`,
    `PubcompPacket`
  - `mqttv5codec.subscription`: `SubscriptionPacket`, `UnsubscriptionPacket`
    (encode only)
  - `mqttv5codec.suback`: `SubackPacket`, `UnsubackPacket` (decode only)
- `mqttv5codec.rng`: `CountingRng`, a deterministic counter that yields
  1, 2, 3, ... and wraps back to 1 after 65535, handy for packet identifiers.

Errors are raised as `BufferError`. Its `kind` attribute holds a
`BufferErrorKind`, such as `INSUFFICIENT_BUFFER_SIZE` or `UTF8_ERROR`.

## Installation

```
pip install mqttv5codec
```

## Encoding a packet

```python
from mqttv5codec.property import Property, PropertyId
from mqttv5codec.publish import PublishPacket, QualityOfService

packet = PublishPacket()
packet.add_qos(QualityOfService.QOS1)
packet.add_topic_name("test")
packet.add_identifier(23432)
packet.property_len = packet.add_properties([
    Property(PropertyId.PAYLOAD_FORMAT, 1),
    Property(PropertyId.MESSAGE_EXPIRY_INTERVAL, 45678),
])
packet.add_message(b"Hello world")

data = packet.encode(100)  # 100 is the size of the output buffer
```

`add_properties` keeps only the properties allowed in that packet type and
returns their total wire length, which is what `property_len` must hold.
`encode` returns the encoded bytes; if the packet does not fit into the given
buffer size it raises `BufferError`.

## Decoding a packet

```python
from mqttv5codec.acks import PubackPacket
from mqttv5codec.buffer import BuffReader

packet = PubackPacket()
packet.decode(BuffReader(data))
print(packet.packet_identifier, packet.reason_code, packet.properties)
```

A packet raises `BufferError` in these cases:

- the bytes hold a different packet type (`PACKET_TYPE_MISMATCH`)
- the packet is only ever sent by a client, so it cannot be decoded
  (`WRONG_PACKET_TO_DECODE`)
- the packet is only ever sent by a server, so it cannot be encoded
  (`WRONG_PACKET_TO_ENCODE`)

## What it does not do

- There are packet classes only for PUBLISH, PUBACK, PUBREC, PUBREL,
  PUBCOMP, SUBSCRIBE, SUBACK, UNSUBSCRIBE and UNSUBACK. CONNECT, CONNACK,
  DISCONNECT, PINGREQ, PINGRESP and AUTH appear in `PacketType`, but cannot
  be encoded or decoded.
- Reason codes are kept as plain integers (`reason_code`, `reason_codes`);
  there is no enumeration of their meanings.
- It is a codec only: it opens no connections, keeps no session state and is
  not an MQTT client or broker.

## Running the tests

```
pip install -e ".[test]"
pytest
```