"""Trig mask decoding.

Each trig category of a track is stored as 8 bytes, one bit per step. The
bytes are not in step order: byte ``i`` holds steps
``TRIG_MASK_STEP_OFFSETS[i]`` to ``TRIG_MASK_STEP_OFFSETS[i] + 7``, bit ``k``
being step ``offset + k``.
"""

from __future__ import annotations

from octatools.core.constants import (
    MICRO_TIMING_LABELS,
    STEP_COUNT,
    TRIG_CONDITION_LABELS,
    TRIG_MASK_LENGTH,
    TRIG_MASK_STEP_OFFSETS,
)


def decode_trig_masks(masks: bytes) -> tuple[bool, ...]:
    """Decode an 8-byte trig mask into 64 per-step flags.

    Longer arrays (the 32-byte recorder mask) only use their first 8 bytes.
    """
    steps = [False] * STEP_COUNT
    for byte_idx, mask in enumerate(masks[:TRIG_MASK_LENGTH]):
        step_offset = TRIG_MASK_STEP_OFFSETS[byte_idx]
        for bit_pos in range(8):
            if mask & (1 << bit_pos):
                steps[step_offset + bit_pos] = True
    return tuple(steps)


def count_trigs(masks: bytes) -> int:
    """Number of set bits across all bytes."""
    return sum(bin(mask).count("1") for mask in masks)


def is_track_active(trigger_mask: bytes) -> bool:
    return any(mask != 0 for mask in trigger_mask)


def decode_trig_condition(condition_byte: int) -> str | None:
    # the upper bit belongs to the micro-timing offset
    condition = condition_byte % 128
    if condition < len(TRIG_CONDITION_LABELS):
        return TRIG_CONDITION_LABELS[condition]
    return None


def trig_repeats(repeat_byte: int) -> int:
    """Repeat count 0-7, stored as ``repeats * 32``."""
    return repeat_byte // 32


def decode_micro_timing(condition_bytes: tuple[int, int]) -> str | None:
    """Micro-timing offset label, or None when the step is on the grid.

    Known offsets get their musical label; anything else is reported only
    by direction.
    """
    first = condition_bytes[0] % 32
    high_bit = condition_bytes[1] >= 128
    if first == 0 and not high_bit:
        return None
    label = MICRO_TIMING_LABELS.get((first, high_bit))
    if label is not None:
        return label
    return "+μ" if first < 15 else "-μ"
