"""A deterministic counting generator used for packet identifiers."""

from __future__ import annotations

_WRAP_AT = 0xFFFF
_U32_MASK = 0xFFFFFFFF


class CountingRng:
    """Yields 1, 2, 3, ... and wraps back to 1 after 65535."""

    def __init__(self, state: int = 0) -> None:
        self.state = state

    def next_u64(self) -> int:
        self.state += 1
        if self.state > _WRAP_AT:
            self.state = 1
        return self.state

    def next_u32(self) -> int:
        return self.next_u64() & _U32_MASK

    def fill_bytes(self, size: int) -> bytes:
        """Return `size` bytes made of little-endian generator outputs."""
        out = bytearray()
        while size - len(out) >= 8:
            out += self.next_u64().to_bytes(8, "little")
        rest = size - len(out)
        if rest > 4:
            out += self.next_u64().to_bytes(8, "little")[:rest]
        elif rest > 0:
            out += self.next_u32().to_bytes(4, "little")[:rest]
        return bytes(out)