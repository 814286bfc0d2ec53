"""Typed raw records read from Octatrack project and bank files.

These mirror the on-disk structures field for field. Values are the raw
integers stored by the device; turning them into labels and statistics is
the job of ``octatools.core.project_reader``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

EMPTY_MASK = bytes(8)


# ── Bank file records ────────────────────────────────────────────────────


@dataclass(frozen=True)
class TrigMasks:
    """Six trig categories of one track, 8 bytes each (recorder: 32)."""

    trigger: bytes = EMPTY_MASK
    trigless: bytes = EMPTY_MASK
    plock: bytes = EMPTY_MASK
    oneshot: bytes = EMPTY_MASK
    swing: bytes = EMPTY_MASK
    slide: bytes = EMPTY_MASK
    recorder: bytes = bytes(32)


@dataclass(frozen=True)
class TrackPatternSettings:
    start_silent: int = 255
    plays_free: int = 0
    trig_mode: int = 0
    trig_quant: int = 0
    oneshot_trk: int = 0


@dataclass(frozen=True)
class StepLocks:
    """Parameter lock values of one step; 255 means "not locked".

    Audio tracks use machine/lfo/amp/slot values, MIDI tracks use the
    ``midi`` values (note, vel, len, not2, not3, not4) and lfo.
    """

    machine: tuple[int, ...] = (255,) * 6
    lfo: tuple[int, ...] = (255,) * 6
    amp: tuple[int, ...] = (255,) * 6  # atk, hold, rel, vol, bal, f
    midi: tuple[int, ...] = (255,) * 6
    static_slot_id: int = 255
    flex_slot_id: int = 255

    @property
    def volume(self) -> int:
        return self.amp[3]


DEFAULT_LOCKS = StepLocks()


@dataclass(frozen=True)
class TrackRecord:
    track_id: int
    is_midi: bool = False
    trig_masks: TrigMasks = field(default_factory=TrigMasks)
    per_track_len: int = 16
    per_track_scale: int = 2
    swing_amount: int = 0
    pattern_settings: TrackPatternSettings = field(default_factory=TrackPatternSettings)
    # 64 entries each; empty tuples mean "all defaults"
    plocks: tuple[StepLocks, ...] = ()
    offsets_repeats_conditions: tuple[tuple[int, int], ...] = ()

    def locks_at(self, step: int) -> StepLocks:
        if step < len(self.plocks):
            return self.plocks[step]
        return DEFAULT_LOCKS

    def condition_bytes_at(self, step: int) -> tuple[int, int]:
        if step < len(self.offsets_repeats_conditions):
            return self.offsets_repeats_conditions[step]
        return (0, 0)


@dataclass(frozen=True)
class PatternScaleRecord:
    master_len_per_track_multiplier: int = 0
    master_len_per_track: int = 15
    master_scale_per_track: int = 2
    master_len: int = 16
    master_scale: int = 2
    scale_mode: int = 0


@dataclass(frozen=True)
class PatternRecord:
    audio_tracks: tuple[TrackRecord, ...] = ()
    midi_tracks: tuple[TrackRecord, ...] = ()
    scale: PatternScaleRecord = field(default_factory=PatternScaleRecord)
    use_project_chain_setting: int = 1
    part_assignment: int = 0
    tempo_1: int = 11
    tempo_2: int = 64


# Parameter pages are read as {page name: {parameter name: raw value}}
Pages = dict[str, dict[str, int]]


@dataclass(frozen=True)
class PartAudioTrackRecord:
    track_id: int
    machine_type: int = 0
    fx1_type: int = 0
    fx2_type: int = 0
    machine_params: Pages = field(default_factory=dict)  # keyed by machine variant
    machine_setup: Pages = field(default_factory=dict)
    values: Pages = field(default_factory=dict)  # lfo, amp, fx1, fx2
    setup: Pages = field(default_factory=dict)  # lfo_setup_1, amp, fx1, fx2, lfo_setup_2
    custom_lfo: bytes = bytes(16)


@dataclass(frozen=True)
class PartMidiTrackRecord:
    track_id: int
    values: Pages = field(default_factory=dict)  # midi, lfo, arp, ctrl1, ctrl2
    setup: Pages = field(default_factory=dict)  # note, lfo1, arp, ctrl1, ctrl2, lfo2
    custom_lfo: bytes = bytes(16)


@dataclass(frozen=True)
class PartRecord:
    part_id: int
    audio_tracks: tuple[PartAudioTrackRecord, ...] = ()
    midi_tracks: tuple[PartMidiTrackRecord, ...] = ()


@dataclass(frozen=True)
class PartsRecord:
    """Working (unsaved) and saved copies of a bank's four parts."""

    unsaved: tuple[PartRecord, ...] = ()
    saved: tuple[PartRecord, ...] = ()
    saved_state: tuple[int, ...] = (0, 0, 0, 0)
    edited_bitmask: int = 0


@dataclass(frozen=True)
class BankRecord:
    patterns: tuple[PatternRecord, ...] = ()
    part_names: tuple[bytes, ...] = ()
    parts: PartsRecord = field(default_factory=PartsRecord)


# ── Project file records ─────────────────────────────────────────────────


@dataclass(frozen=True)
class SampleSlotRecord:
    slot_type: str  # "STATIC" or "FLEX"
    slot_id: int
    path: str = ""
    gain: int = 72
    loop_mode: int = 0
    timestretch_mode: int = 0


@dataclass(frozen=True)
class ProjectRecord:
    """Sections of a project file as key/value maps plus the sample slots."""

    meta: dict[str, str] = field(default_factory=dict)
    settings: dict[str, str] = field(default_factory=dict)
    states: dict[str, str] = field(default_factory=dict)
    slots: tuple[SampleSlotRecord, ...] = ()

    def setting(self, key: str, default: int = 0) -> int:
        return _as_int(self.settings.get(key), default)

    def state(self, key: str, default: int = 0) -> int:
        return _as_int(self.states.get(key), default)


def _as_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default
