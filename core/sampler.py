"""
Collision-avoiding random block sampler.

Draws block indices from [0, total_blocks) without repeating within a pass,
so a cold-read benchmark never re-reads a block the page cache already holds.
Visited blocks are tracked in a bitset, one bit per block, which keeps an
8 GiB file at 1K chunks to 1 MiB of bookkeeping.
"""

import math
import random
from typing import Optional

from core.errors import SampleSpaceExhausted

BASE_PROBE_STRIDE = 5


def probe_stride(total_blocks: int) -> int:
    """
    Smallest stride >= BASE_PROBE_STRIDE that is coprime with *total_blocks*.

    A coprime stride makes the probe sequence c, c+s, c+2s, ... (mod N) a full
    cycle over all N slots, so probing always reaches a free slot when one exists.
    """
    if total_blocks <= BASE_PROBE_STRIDE:
        return 1
    stride = BASE_PROBE_STRIDE
    while math.gcd(stride, total_blocks) != 1:
        stride += 1
    return stride


class SampleSpace:
    """Bitset of visited blocks over [0, total_blocks)."""

    def __init__(self, total_blocks: int):
        if total_blocks <= 0:
            raise ValueError(f"total_blocks must be positive (got {total_blocks})")
        self.total_blocks = total_blocks
        self._bits = bytearray((total_blocks + 7) // 8)
        self._visited = 0

    def __len__(self) -> int:
        return self._visited

    def __contains__(self, index: int) -> bool:
        return bool(self._bits[index >> 3] & (1 << (index & 7)))

    def mark(self, index: int) -> None:
        mask = 1 << (index & 7)
        if not self._bits[index >> 3] & mask:
            self._bits[index >> 3] |= mask
            self._visited += 1

    @property
    def exhausted(self) -> bool:
        return self._visited >= self.total_blocks


def next_block(space: SampleSpace, rng: random.Random, stride: Optional[int] = None):
    """
    Draw one unvisited block index from *space* and mark it visited.

    Returns:
        tuple: (index, probes) where probes counts the collisions stepped over.

    Raises:
        SampleSpaceExhausted: every block has already been drawn.
    """
    if space.exhausted:
        raise SampleSpaceExhausted(
            f"all {space.total_blocks} blocks of the sample space have been drawn"
        )
    if stride is None:
        stride = probe_stride(space.total_blocks)

    index = rng.randrange(space.total_blocks)
    probes = 0
    while index in space:
        index = (index + stride) % space.total_blocks
        probes += 1
    space.mark(index)
    return index, probes


class BlockSampler:
    """Per-pass sampler: owns one SampleSpace and counts probe steps."""

    def __init__(self, total_blocks: int, rng: Optional[random.Random] = None):
        self.space = SampleSpace(total_blocks)
        self.rng = rng if rng is not None else random.Random()
        self.stride = probe_stride(total_blocks)
        self.probes = 0

    @property
    def drawn(self) -> int:
        return len(self.space)

    def next(self) -> int:
        index, probes = next_block(self.space, self.rng, self.stride)
        self.probes += probes
        return index
