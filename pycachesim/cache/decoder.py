from __future__ import annotations
from typing import NamedTuple

from ..config import CacheGeometry


class DecodedAddress(NamedTuple):
    tag: int
    set_index: int
    block_offset: int


class AddressDecoder:
    """Splits addresses into tag, set index and block offset for a fixed geometry."""

    def __init__(self, geometry: CacheGeometry):
        self.geometry = geometry
        self.offset_bits = geometry.block_offset_bits
        self.index_bits = geometry.set_index_bits
        self.offset_mask = (1 << self.offset_bits) - 1
        self.index_mask = (1 << self.index_bits) - 1

    def decode(self, address: int) -> DecodedAddress:
        """Decomposes an address into tag, index, and offset."""
        block_offset = address & self.offset_mask
        set_index = (address >> self.offset_bits) & self.index_mask
        tag = address >> (self.offset_bits + self.index_bits)
        return DecodedAddress(tag, set_index, block_offset)

    def reconstruct_address(self, tag: int, set_index: int) -> int:
        """Reconstructs the block start address from tag and index."""
        return (tag << (self.index_bits + self.offset_bits)) | (set_index << self.offset_bits)
