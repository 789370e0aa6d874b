"""Binary ``msch`` schematic encoding.

Layout of a version 1 file::

    "msch" | version:u8 | zlib(
        width:i16 height:i16
        tag_count:u8 (key:utf value:utf)*
        palette_count:u8 (block_name:utf)*
        tile_count:i32 (palette_index:u8 position:i32 config:object rotation:u8)*
    )

``utf`` is a big-endian u16 byte length followed by the encoded text.
Positions are packed as ``(x << 16) | (y & 0xFFFF)``.
"""

from __future__ import annotations

import io
import struct
import zlib
from typing import Optional, Sequence, Tuple

SCHEMATIC_HEADER = b"msch"
SCHEMATIC_VERSION = 1
PROCESSOR_CONFIG_VERSION = 1

# Typed object tags
OBJECT_NULL = 0
OBJECT_BYTES = 14

MAX_SHORT = 0x7FFF


def pack_position(x: int, y: int) -> int:
    """Pack a tile position into one signed 32-bit integer."""
    packed = ((x & 0xFFFF) << 16) | (y & 0xFFFF)
    if packed >= 1 << 31:
        packed -= 1 << 32
    return packed


def unpack_position(packed: int) -> Tuple[int, int]:
    packed &= 0xFFFFFFFF
    x = (packed >> 16) & 0xFFFF
    y = packed & 0xFFFF
    if x >= 1 << 15:
        x -= 1 << 16
    if y >= 1 << 15:
        y -= 1 << 16
    return x, y


class BinaryWriter:
    """Big-endian writer for the primitive types used in schematics."""

    def __init__(self) -> None:
        self.buffer = io.BytesIO()

    def u8(self, value: int) -> None:
        self.buffer.write(struct.pack(">B", value & 0xFF))

    def i16(self, value: int) -> None:
        self.buffer.write(struct.pack(">h", value))

    def i32(self, value: int) -> None:
        self.buffer.write(struct.pack(">i", value))

    def raw(self, data: bytes) -> None:
        self.buffer.write(data)

    def utf(self, text: str) -> None:
        data = text.encode("utf-8")
        if len(data) > 0xFFFF:
            raise ValueError(f"String too long for schematic field ({len(data)} bytes)")
        self.buffer.write(struct.pack(">H", len(data)))
        self.buffer.write(data)

    def object(self, value: Optional[bytes]) -> None:
        if value is None:
            self.u8(OBJECT_NULL)
            return
        self.u8(OBJECT_BYTES)
        self.i32(len(value))
        self.raw(value)

    def getvalue(self) -> bytes:
        return self.buffer.getvalue()


def encode_processor_config(
    code: str, links: Sequence[Tuple[str, int, int]]
) -> bytes:
    """Compressed processor config: code plus links relative to the processor."""
    writer = BinaryWriter()
    writer.u8(PROCESSOR_CONFIG_VERSION)
    code_bytes = code.encode("utf-8")
    writer.i32(len(code_bytes))
    writer.raw(code_bytes)
    writer.i32(len(links))
    for name, dx, dy in links:
        writer.utf(name)
        writer.i16(dx)
        writer.i16(dy)
    return zlib.compress(writer.getvalue())
