"""Cursor-based reading and writing of MQTT v5 wire primitives."""

from __future__ import annotations

from typing import Iterable, Protocol

from .types import (
    BinaryData,
    BufferError,
    BufferErrorKind,
    EncodedString,
    StringPair,
    TopicFilter,
)

_VBI_MAX = 268_435_455
_VBI_SIZE = 4


class RemLenError(Exception):
    """Raised when the remaining length in a written packet is incomplete."""

    def __init__(self) -> None:
        super().__init__("remaining length is not complete")


class _WritableProperty(Protocol):
    def identifier(self) -> int: ...

    def encode(self, writer: BuffWriter) -> None: ...


def encode_variable_byte_int(value: int) -> bytes:
    """Encode `value` as a variable byte integer, zero-padded to four bytes."""
    if not 0 <= value <= _VBI_MAX:
        raise BufferError(BufferErrorKind.ENCODING_ERROR)
    out = bytearray()
    while True:
        digit = value % 128
        value //= 128
        if value:
            digit |= 0x80
        out.append(digit)
        if not value:
            break
    return bytes(out.ljust(_VBI_SIZE, b"\x00"))


def decode_variable_byte_int(encoded: bytes) -> int:
    """Decode a variable byte integer from at most its first four bytes."""
    value = 0
    multiplier = 1
    for byte in encoded[:_VBI_SIZE]:
        value += (byte & 0x7F) * multiplier
        if not byte & 0x80:
            return value
        multiplier *= 128
    raise BufferError(BufferErrorKind.VARIABLE_BYTE_INTEGER_ERROR)


def variable_byte_int_len(encoded: bytes) -> int:
    """Number of bytes the encoded variable byte integer really occupies."""
    count = 0
    for byte in encoded[:_VBI_SIZE]:
        count += 1
        if not byte & 0x80:
            break
    return count


class BuffReader:
    """Reads MQTT primitives from a byte buffer, advancing a cursor."""

    def __init__(self, buffer: bytes, buff_len: int | None = None) -> None:
        self._buffer = bytes(buffer)
        limit = len(self._buffer)
        self._len = limit if buff_len is None else min(buff_len, limit)
        self.position = 0

    def increment_position(self, increment: int) -> None:
        self.position += increment

    def _require(self, size: int) -> None:
        if self.position + size > self._len:
            raise BufferError(BufferErrorKind.INSUFFICIENT_BUFFER_SIZE)

    def read_variable_byte_int(self) -> int:
        """Read a one- to four-byte variable byte integer."""
        collected = bytearray()
        length = 1
        for offset in range(_VBI_SIZE):
            index = self.position + offset
            if index >= self._len:
                raise BufferError(BufferErrorKind.INSUFFICIENT_BUFFER_SIZE)
            byte = self._buffer[index]
            collected.append(byte)
            if not byte & 0x80:
                break
            length += 1
        self.increment_position(length)
        return decode_variable_byte_int(bytes(collected))

    def _read_int(self, size: int) -> int:
        self._require(size)
        chunk = self._buffer[self.position:self.position + size]
        self.increment_position(size)
        return int.from_bytes(chunk, "big")

    def read_u32(self) -> int:
        return self._read_int(4)

    def read_u16(self) -> int:
        return self._read_int(2)

    def read_u8(self) -> int:
        return self._read_int(1)

    def _read_prefixed(self) -> bytes:
        length = self.read_u16()
        self._require(length)
        return self._buffer[self.position:self.position + length]

    def read_string(self) -> EncodedString:
        """Read a length-prefixed UTF-8 string."""
        raw = self._read_prefixed()
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise BufferError(BufferErrorKind.UTF8_ERROR) from None
        self.increment_position(len(raw))
        return EncodedString(text)

    def read_binary(self) -> BinaryData:
        """Read length-prefixed binary data."""
        raw = self._read_prefixed()
        self.increment_position(len(raw))
        return BinaryData(raw)

    def read_string_pair(self) -> StringPair:
        name = self.read_string()
        value = self.read_string()
        return StringPair(name, value)

    def read_message(self, total_len: int) -> bytes:
        """Return the bytes from the cursor up to `total_len`, capped at the buffer end."""
        end = self._len if total_len > self._len else total_len
        return self._buffer[self.position:end]

    def peek_u8(self) -> int:
        """Return the byte at the cursor without advancing."""
        self._require(1)
        return self._buffer[self.position]


class BuffWriter:
    """Writes MQTT primitives into a fixed-capacity buffer, advancing a cursor."""

    def __init__(self, buff_len: int) -> None:
        self._buffer = bytearray(buff_len)
        self._len = buff_len
        self.position = 0

    def getvalue(self) -> bytes:
        """Bytes written so far."""
        return bytes(self._buffer[:self.position])

    def _byte_at(self, index: int) -> int:
        return self._buffer[index] if index < len(self._buffer) else 0

    def get_n_byte(self, n: int) -> int:
        """Return the n-th written byte, or 0 if the cursor has not reached it."""
        return self._byte_at(n) if self.position >= n else 0

    def get_rem_len(self) -> bytes:
        """Return the remaining-length field of the packet written so far."""
        if self.position == 0:
            raise RemLenError()
        limit = 4 if self.position >= 5 else self.position - 1
        result = bytearray(_VBI_SIZE)
        for i in range(1, _VBI_SIZE + 1):
            byte = self._byte_at(i)
            result[i - 1] = byte
            if not byte & 0x80:
                return bytes(result)
            if i == limit and i != 4:
                raise RemLenError()
            if i == limit:
                return bytes(result)
        return bytes(result)

    def insert_ref(self, length: int, data: bytes) -> None:
        """Write the first `length` bytes of `data`."""
        if self.position + length > self._len:
            raise BufferError(BufferErrorKind.INSUFFICIENT_BUFFER_SIZE)
        chunk = bytes(data[:length])
        if len(chunk) < length:
            raise ValueError(f"data holds fewer than {length} bytes")
        self._buffer[self.position:self.position + length] = chunk
        self.position += length

    def write_u8(self, byte: int) -> None:
        if self.position >= self._len:
            raise BufferError(BufferErrorKind.INSUFFICIENT_BUFFER_SIZE)
        self._buffer[self.position] = byte
        self.position += 1

    def write_u16(self, value: int) -> None:
        self.insert_ref(2, value.to_bytes(2, "big"))

    def write_u32(self, value: int) -> None:
        self.insert_ref(4, value.to_bytes(4, "big"))

    def write_string_ref(self, string: EncodedString) -> None:
        self.write_u16(string.length)
        if string.length:
            self.insert_ref(string.length, string.raw)

    def write_binary_ref(self, binary: BinaryData) -> None:
        self.write_u16(binary.length)
        self.insert_ref(binary.length, binary.bin)

    def write_string_pair_ref(self, pair: StringPair) -> None:
        self.write_string_ref(pair.name)
        self.write_string_ref(pair.value)

    def write_variable_byte_int(self, value: int) -> None:
        encoded = encode_variable_byte_int(value)
        self.insert_ref(variable_byte_int_len(encoded), encoded)

    def write_properties(self, properties: Iterable[_WritableProperty]) -> None:
        """Write each property as its identifier byte followed by its value."""
        for prop in properties:
            self.write_u8(int(prop.identifier()))
            prop.encode(self)

    def write_topic_filters_ref(
        self, sub: bool, length: int, filters: Iterable[TopicFilter]
    ) -> None:
        """Write topic filters; subscription options only when `sub` is true."""
        for topic_filter in filters:
            self.write_string_ref(topic_filter.filter)
            if sub:
                self.write_u8(topic_filter.sub_options)