"""Chunk storage, block classification and chunk packet parsing."""

from __future__ import annotations

import io
import logging
import struct
import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import BinaryIO, Iterator, Optional

log = logging.getLogger(__name__)

BLOCK_ENTRIES = 16 * 16 * 16
BIOME_ENTRIES = 4 * 4 * 4

_UINT32_MASK = 0xFFFFFFFF


class BlockType(IntEnum):
    """Classification of a block for pathfinding."""

    AIR = 0
    SOLID = 1
    WATER = 2
    CLIMBABLE = 3
    DANGEROUS = 4


# Block state ids for 1.21.x; approximate and may differ between sub-versions.
_AIR_STATES = frozenset({0, 12516, 12517})
_CLASSIFIED_RANGES = (
    (range(113, 129), BlockType.WATER),
    (range(129, 145), BlockType.DANGEROUS),  # lava
    (range(5765, 5773), BlockType.CLIMBABLE),  # ladder
    (range(6849, 6881), BlockType.CLIMBABLE),  # vine
    (range(2600, 2632), BlockType.DANGEROUS),  # fire
    (range(5654, 5670), BlockType.DANGEROUS),  # cactus
)

_PASSABLE = frozenset({BlockType.AIR, BlockType.WATER})
_STANDABLE_BELOW = frozenset({BlockType.SOLID, BlockType.CLIMBABLE})
_FEET_CLEAR = frozenset({BlockType.AIR, BlockType.WATER, BlockType.CLIMBABLE})


def classify_block(state_id: int) -> BlockType:
    """Map a block state id to a BlockType."""
    if state_id in _AIR_STATES:
        return BlockType.AIR
    for ids, kind in _CLASSIFIED_RANGES:
        if state_id in ids:
            return kind
    return BlockType.SOLID


@dataclass
class ChunkSection:
    """A 16x16x16 section stored as a paletted container."""

    block_count: int = 0
    bits_per_entry: int = 0
    palette: list[int] = field(default_factory=list)
    data: list[int] = field(default_factory=list)


@dataclass
class ChunkColumn:
    """A full-height column of sections at chunk coordinates (x, z)."""

    x: int
    z: int
    sections: list[ChunkSection] = field(default_factory=list)
    min_y: int = -64


def get_from_paletted_container(section: ChunkSection, block_index: int) -> int:
    """Return the block state stored at ``block_index`` of a section."""
    bpe = section.bits_per_entry
    if bpe == 0:
        return section.palette[0] if section.palette else 0
    per_long = 64 // bpe
    if per_long == 0:
        raise ValueError(f"bits per entry out of range: {bpe}")
    long_index, slot = divmod(block_index, per_long)
    if long_index >= len(section.data):
        return 0
    value = (section.data[long_index] >> (slot * bpe)) & ((1 << bpe) - 1)
    if value < len(section.palette):
        return section.palette[value]
    return value


def data_array_long_count(bpe: int, num_entries: int) -> int:
    """Number of 64-bit longs needed to pack ``num_entries`` values of ``bpe`` bits."""
    if bpe == 0:
        return 0
    per_long = 64 // bpe
    if per_long == 0:
        raise ValueError(f"bits per entry out of range: {bpe}")
    return -(-num_entries // per_long)


def _read_exact(reader: BinaryIO, size: int) -> bytes:
    chunk = reader.read(size)
    if len(chunk) != size:
        raise EOFError(f"expected {size} bytes, got {len(chunk)}")
    return chunk


def _read_struct(reader: BinaryIO, fmt: str) -> int:
    return struct.unpack(fmt, _read_exact(reader, struct.calcsize(fmt)))[0]


def _read_varint(reader: BinaryIO) -> int:
    value = 0
    for shift in range(0, 35, 7):
        byte = _read_exact(reader, 1)[0]
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            value &= _UINT32_MASK
            return value - (1 << 32) if value & 0x80000000 else value
    raise ValueError("VarInt is too big")


def parse_paletted_container(
    reader: BinaryIO, num_entries: int
) -> tuple[int, list[int], list[int]]:
    """Read a paletted container and return ``(bits_per_entry, palette, data)``.

    A direct container (more than 8 bits per entry) has an empty palette.
    """
    bpe = _read_exact(reader, 1)[0]
    if bpe == 0:
        return 0, [_read_varint(reader) & _UINT32_MASK], []

    palette: list[int] = []
    if bpe <= 8:
        length = _read_varint(reader)
        if length < 0:
            raise ValueError(f"negative palette length: {length}")
        palette = [_read_varint(reader) & _UINT32_MASK for _ in range(length)]

    count = data_array_long_count(bpe, num_entries)
    data = list(struct.unpack(f">{count}q", _read_exact(reader, 8 * count)))
    return bpe, palette, data


def parse_chunk_section(reader: BinaryIO) -> ChunkSection:
    """Read one chunk section; the biome container is read and discarded."""
    block_count = _read_struct(reader, ">h")
    bpe, palette, data = parse_paletted_container(reader, BLOCK_ENTRIES)
    parse_paletted_container(reader, BIOME_ENTRIES)
    return ChunkSection(block_count=block_count, bits_per_entry=bpe, palette=palette, data=data)


def _iter_sections(reader: BinaryIO, count: int) -> Iterator[ChunkSection]:
    for _ in range(count):
        try:
            yield parse_chunk_section(reader)
        except (EOFError, ValueError):
            return


class World:
    """Thread-safe store of loaded chunk columns."""

    def __init__(self, min_y: int = -64, height: int = 384) -> None:
        self.min_y = min_y
        self.height = height
        self._chunks: dict[tuple[int, int], ChunkColumn] = {}
        self._lock = threading.RLock()

    def get_block(self, x: int, y: int, z: int) -> int:
        """Block state at (x, y, z); 0 when the chunk or section is missing."""
        with self._lock:
            column = self._chunks.get((x >> 4, z >> 4))
            if column is None:
                return 0
            section_index = (y - column.min_y) >> 4
            if not 0 <= section_index < len(column.sections):
                return 0
            section = column.sections[section_index]
            if section.bits_per_entry == 0:
                return section.palette[0] if section.palette else 0
            block_index = ((y & 0xF) << 8) | ((z & 0xF) << 4) | (x & 0xF)
            return get_from_paletted_container(section, block_index)

    def has_chunk(self, x: int, z: int) -> bool:
        with self._lock:
            return (x >> 4, z >> 4) in self._chunks

    def is_block_solid(self, x: int, y: int, z: int) -> bool:
        return self.get_block(x, y, z) != 0

    def is_block_solid_or_unloaded(self, x: int, y: int, z: int) -> bool:
        """Like is_block_solid, but unloaded chunks count as solid."""
        if not self.has_chunk(x, z):
            return True
        return self.get_block(x, y, z) != 0

    def _kind(self, x: int, y: int, z: int) -> BlockType:
        return classify_block(self.get_block(x, y, z))

    def is_passable(self, x: int, y: int, z: int) -> bool:
        return self._kind(x, y, z) in _PASSABLE

    def is_water(self, x: int, y: int, z: int) -> bool:
        return self._kind(x, y, z) is BlockType.WATER

    def is_climbable(self, x: int, y: int, z: int) -> bool:
        return self._kind(x, y, z) is BlockType.CLIMBABLE

    def is_dangerous(self, x: int, y: int, z: int) -> bool:
        return self._kind(x, y, z) is BlockType.DANGEROUS

    def can_stand_at(self, x: int, y: int, z: int) -> bool:
        """Solid or climbable below, clear feet and head."""
        return (
            self._kind(x, y - 1, z) in _STANDABLE_BELOW
            and self._kind(x, y, z) in _FEET_CLEAR
            and self._kind(x, y + 1, z) in _PASSABLE
        )

    def can_stand_in_water(self, x: int, y: int, z: int) -> bool:
        return self._kind(x, y, z) is BlockType.WATER and self._kind(x, y + 1, z) in _PASSABLE

    def is_safe_to_fall(self, x: int, start_y: int, z: int, max_drop: int) -> Optional[int]:
        """Landing Y when falling from ``start_y``, or None if the fall is unsafe."""
        for check_y in range(start_y - 1, start_y - max_drop - 1, -1):
            kind = self._kind(x, check_y, z)
            if kind is BlockType.SOLID:
                land_y = check_y + 1
                if self._kind(x, land_y, z) in _PASSABLE and self._kind(x, land_y + 1, z) in _PASSABLE:
                    return land_y
                return None
            if kind is BlockType.DANGEROUS:
                return None
            if kind is BlockType.WATER:
                return check_y
        return None

    def set_chunk(self, column: ChunkColumn) -> None:
        with self._lock:
            self._chunks[(column.x, column.z)] = column

    def unload_chunk(self, x: int, z: int) -> None:
        with self._lock:
            self._chunks.pop((x, z), None)

    def chunk_count(self) -> int:
        with self._lock:
            return len(self._chunks)

    def load_chunk_packet(self, data: bytes) -> ChunkColumn:
        """Parse a chunk data packet body, store the column and return it.

        Raises ValueError when the header is malformed or truncated. Sections
        that fail to parse are left empty.
        """
        reader = io.BytesIO(data)
        try:
            chunk_x = _read_struct(reader, ">i")
            chunk_z = _read_struct(reader, ">i")
            for _ in range(_read_varint(reader)):
                _read_varint(reader)  # heightmap type
                long_count = _read_varint(reader)
                if long_count < 0:
                    raise ValueError(f"negative heightmap length: {long_count}")
                reader.seek(long_count * 8, io.SEEK_CUR)
            size = _read_varint(reader)
            if size < 0:
                raise ValueError(f"negative chunk data size: {size}")
            payload = _read_exact(reader, size)
        except EOFError as exc:
            raise ValueError(f"truncated chunk data: {exc}") from exc

        count = self.height // 16
        sections = list(_iter_sections(io.BytesIO(payload), count))
        sections.extend(ChunkSection() for _ in range(count - len(sections)))

        column = ChunkColumn(x=chunk_x, z=chunk_z, sections=sections, min_y=self.min_y)
        self.set_chunk(column)
        total = self.chunk_count()
        if total <= 5 or total % 100 == 0:
            log.info("Stored chunk (%d,%d) - total: %d", chunk_x, chunk_z, total)
        return column