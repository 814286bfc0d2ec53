"""Octatrack project and bank file parser.

Turns ``project.work``/``project.strd`` (sectioned ``KEY=VALUE`` text) and
``bankNN.work``/``bankNN.strd`` (fixed-layout binary) into the typed records
of ``octatools.core.records``.

Bank layout (offsets in bytes, all fields u8 unless noted)::

    bank     header[22] "FORM....DPS1BANK" | pattern[16] |
             part[4] (unsaved) | part[4] (saved) | parts_saved_state[4] |
             parts_edited_bitmask | part_names[4][7] | checksum u16
    pattern  header[8] "PTRN" | audio track[8] | midi track[8] |
             scale[6] | chain[2] | unknown | part_assignment | unknown |
             tempo_1 | tempo_2
    audio    header[4] "TRAC" | unknown[4] | track_id |
             trigger[8] trigless[8] plock[8] oneshot[8] recorder[32]
             swing[8] slide[8] | per_track_len | per_track_scale |
             swing_amount | settings[5] | unknown | plocks[64][32] |
             unknown[64] | offset_repeat_condition[64][2]
    midi     header[4] "MTRA" | unknown[4] | track_id |
             trigger[8] trigless[8] plock[8] swing[8] unknown[8] |
             per_track_len | per_track_scale | swing_amount | settings[5] |
             unknown | plocks[64][32] | unknown[128] |
             offset_repeat_condition[64][2]
    part     header[4] "PART" | unknown[4] | part_id | fx1_type[8] |
             fx2_type[8] | active_scenes[2] | volumes[8][2] |
             machine_type[8] | machine_params[8][30] |
             machine_setup[8][30] | machine_slots[8][5] |
             audio_values[8][24] | audio_setup[8][30] | midi_values[8][32] |
             midi_setup[8][36] | audio_custom_lfo[8][16] |
             midi_custom_lfo[8][16]

Parameter blocks are runs of 6-byte pages; the page tables below name each
byte. Volumes, machine slots and scenes are skipped. Checksums are not
verified.
"""

from __future__ import annotations

import logging
from pathlib import Path

from octatools.core.constants import (
    AUDIO_TRACK_COUNT,
    MIDI_TRACK_COUNT,
    PART_COUNT,
    PATTERN_COUNT,
    STEP_COUNT,
)
from octatools.core.errors import OtParseError
from octatools.core.records import (
    BankRecord,
    PartAudioTrackRecord,
    PartMidiTrackRecord,
    PartRecord,
    PartsRecord,
    PatternRecord,
    PatternScaleRecord,
    ProjectRecord,
    SampleSlotRecord,
    StepLocks,
    TrackPatternSettings,
    TrackRecord,
    TrigMasks,
)

logger = logging.getLogger(__name__)

# ── Bank layout ──────────────────────────────────────────────────────────

BANK_MAGIC = b"FORM"
BANK_TYPE = b"DPS1BANK"
BANK_TYPE_OFFSET = 8
BANK_HEADER_SIZE = 22

PATTERN_MAGIC = b"PTRN"
PATTERN_HEADER_SIZE = 8

AUDIO_TRACK_MAGIC = b"TRAC"
MIDI_TRACK_MAGIC = b"MTRA"
TRACK_HEADER_SIZE = 9  # magic, unknown[4], track_id

PLOCK_ENTRY_SIZE = 32
PLOCKS_SIZE = STEP_COUNT * PLOCK_ENTRY_SIZE
CONDITIONS_SIZE = STEP_COUNT * 2

# (name, size) in file order after the track header
AUDIO_MASK_FIELDS = (
    ("trigger", 8), ("trigless", 8), ("plock", 8), ("oneshot", 8),
    ("recorder", 32), ("swing", 8), ("slide", 8),
)
MIDI_MASK_FIELDS = (
    ("trigger", 8), ("trigless", 8), ("plock", 8), ("swing", 8), ("unknown", 8),
)

AUDIO_MASKS_SIZE = sum(size for _, size in AUDIO_MASK_FIELDS)
MIDI_MASKS_SIZE = sum(size for _, size in MIDI_MASK_FIELDS)

# per_track_len, per_track_scale, swing_amount, settings[5], unknown
TRACK_SETTINGS_SIZE = 9

AUDIO_TRACK_TAIL_UNKNOWN = 64
MIDI_TRACK_TAIL_UNKNOWN = 128

AUDIO_TRACK_SIZE = (
    TRACK_HEADER_SIZE + AUDIO_MASKS_SIZE + TRACK_SETTINGS_SIZE
    + PLOCKS_SIZE + AUDIO_TRACK_TAIL_UNKNOWN + CONDITIONS_SIZE
)
MIDI_TRACK_SIZE = (
    TRACK_HEADER_SIZE + MIDI_MASKS_SIZE + TRACK_SETTINGS_SIZE
    + PLOCKS_SIZE + MIDI_TRACK_TAIL_UNKNOWN + CONDITIONS_SIZE
)

# scale[6], chain[2], unknown, part_assignment, unknown, tempo_1, tempo_2
PATTERN_TRAILER_SIZE = 13

PATTERN_SIZE = (
    PATTERN_HEADER_SIZE
    + AUDIO_TRACK_COUNT * AUDIO_TRACK_SIZE
    + MIDI_TRACK_COUNT * MIDI_TRACK_SIZE
    + PATTERN_TRAILER_SIZE
)

# ── Part layout ──────────────────────────────────────────────────────────

PART_MAGIC = b"PART"
PAGE_SIZE = 6

# (page name, parameter names); None marks an unused byte
_STD_MACHINE = ("ptch", "strt", "len", "rate", "rtrg", "rtim")
_STD_SETUP = ("xloop", "slic", "len", "rate", "tstr", "tsns")
_UNUSED_PAGE = (None,) * PAGE_SIZE
_LFO = ("spd1", "spd2", "spd3", "dep1", "dep2", "dep3")
_LFO_SETUP_1 = ("lfo1_pmtr", "lfo2_pmtr", "lfo3_pmtr", "lfo1_wave", "lfo2_wave", "lfo3_wave")
_LFO_SETUP_2 = ("lfo1_mult", "lfo2_mult", "lfo3_mult", "lfo1_trig", "lfo2_trig", "lfo3_trig")
_FX = tuple(f"param_{i}" for i in range(1, 7))
_FX_SETUP = tuple(f"setting{i}" for i in range(1, 7))

MACHINE_PARAM_PAGES = (
    ("static", _STD_MACHINE),
    ("flex", _STD_MACHINE),
    ("thru", ("in_ab", "vol_ab", None, "in_cd", "vol_cd", None)),
    ("neighbor", _UNUSED_PAGE),
    ("pickup", ("ptch", "dir", "len", None, "gain", "op")),
)
MACHINE_SETUP_PAGES = (
    ("static", _STD_SETUP),
    ("flex", _STD_SETUP),
    ("thru", _UNUSED_PAGE),
    ("neighbor", _UNUSED_PAGE),
    ("pickup", (None, None, None, None, "tstr", "tsns")),
)
AUDIO_VALUE_PAGES = (
    ("lfo", _LFO),
    ("amp", ("atk", "hold", "rel", "vol", "bal", "f")),
    ("fx1", _FX),
    ("fx2", _FX),
)
AUDIO_SETUP_PAGES = (
    ("lfo_setup_1", _LFO_SETUP_1),
    ("amp", ("amp", "sync", "atck", "fx1", "fx2", None)),
    ("fx1", _FX_SETUP),
    ("fx2", _FX_SETUP),
    ("lfo_setup_2", _LFO_SETUP_2),
)
MIDI_VALUE_PAGES = (
    ("midi", ("note", "vel", "len", "not2", "not3", "not4")),
    ("lfo", _LFO),
    ("arp", ("tran", "leg", "mode", "spd", "rnge", "nlen")),
    ("ctrl1", ("pb", "at", "cc1", "cc2", "cc3", "cc4")),
    ("ctrl2", ("cc5", "cc6", "cc7", "cc8", "cc9", "cc10")),
)
MIDI_VALUES_UNKNOWN = 2
MIDI_SETUP_PAGES = (
    ("note", ("chan", "bank", "prog", None, "sbnk", None)),
    ("lfo1", _LFO_SETUP_1),
    ("arp", ("len", "key", None, None, None, None)),
    ("ctrl1", (None, None, "cc1_num", "cc2_num", "cc3_num", "cc4_num")),
    ("ctrl2", ("cc5_num", "cc6_num", "cc7_num", "cc8_num", "cc9_num", "cc10_num")),
    ("lfo2", _LFO_SETUP_2),
)
CUSTOM_LFO_SIZE = 16

# (name, size) in file order within a part
PART_FIELDS = (
    ("header", 4 + 4 + 1),  # magic, unknown[4], part_id
    ("fx1_types", AUDIO_TRACK_COUNT),
    ("fx2_types", AUDIO_TRACK_COUNT),
    ("active_scenes", 2),
    ("volumes", AUDIO_TRACK_COUNT * 2),
    ("machine_types", AUDIO_TRACK_COUNT),
    ("machine_params", AUDIO_TRACK_COUNT * len(MACHINE_PARAM_PAGES) * PAGE_SIZE),
    ("machine_setup", AUDIO_TRACK_COUNT * len(MACHINE_SETUP_PAGES) * PAGE_SIZE),
    ("machine_slots", AUDIO_TRACK_COUNT * 5),
    ("audio_values", AUDIO_TRACK_COUNT * len(AUDIO_VALUE_PAGES) * PAGE_SIZE),
    ("audio_setup", AUDIO_TRACK_COUNT * len(AUDIO_SETUP_PAGES) * PAGE_SIZE),
    ("midi_values", MIDI_TRACK_COUNT * (len(MIDI_VALUE_PAGES) * PAGE_SIZE + MIDI_VALUES_UNKNOWN)),
    ("midi_setup", MIDI_TRACK_COUNT * len(MIDI_SETUP_PAGES) * PAGE_SIZE),
    ("audio_custom_lfo", AUDIO_TRACK_COUNT * CUSTOM_LFO_SIZE),
    ("midi_custom_lfo", MIDI_TRACK_COUNT * CUSTOM_LFO_SIZE),
)


def _field_offsets(fields) -> dict[str, int]:
    offsets: dict[str, int] = {}
    pos = 0
    for name, size in fields:
        offsets[name] = pos
        pos += size
    return offsets


PART_FIELD_OFFSETS = _field_offsets(PART_FIELDS)
PART_SIZE = sum(size for _, size in PART_FIELDS)
PART_ID_OFFSET = 8
MIDI_VALUES_STRIDE = len(MIDI_VALUE_PAGES) * PAGE_SIZE + MIDI_VALUES_UNKNOWN

PARTS_OFFSET = BANK_HEADER_SIZE + PATTERN_COUNT * PATTERN_SIZE
PARTS_SIZE = 2 * PART_COUNT * PART_SIZE
PARTS_STATE_SIZE = PART_COUNT + 1  # parts_saved_state[4], parts_edited_bitmask

PART_NAME_SIZE = 7
CHECKSUM_SIZE = 2
BANK_TAIL_SIZE = PART_COUNT * PART_NAME_SIZE + CHECKSUM_SIZE

MIN_BANK_SIZE = PARTS_OFFSET + PARTS_SIZE + PARTS_STATE_SIZE + BANK_TAIL_SIZE


class BankParser:
    """Parser for Octatrack bank files."""

    def __init__(self, bank_path: Path):
        self.path = bank_path
        self.data = b""

    def parse(self) -> BankRecord:
        """Read the bank file and return a BankRecord."""
        with open(self.path, "rb") as f:
            self.data = f.read()
        return self.parse_bytes(self.data)

    def parse_bytes(self, data: bytes) -> BankRecord:
        self.data = data
        self._check_header()

        patterns = []
        offset = BANK_HEADER_SIZE
        for pattern_id in range(PATTERN_COUNT):
            patterns.append(self._read_pattern(offset, pattern_id))
            offset += PATTERN_SIZE

        return BankRecord(
            patterns=tuple(patterns),
            part_names=self._read_part_names(),
            parts=self._read_parts(),
        )

    def _check_header(self):
        if len(self.data) < MIN_BANK_SIZE:
            raise OtParseError(
                f"{self.path}: bank file too short ({len(self.data)} < {MIN_BANK_SIZE} bytes)"
            )
        type_end = BANK_TYPE_OFFSET + len(BANK_TYPE)
        if (
            not self.data.startswith(BANK_MAGIC)
            or self.data[BANK_TYPE_OFFSET:type_end] != BANK_TYPE
        ):
            raise OtParseError(f"{self.path}: not an Octatrack bank file")

    # ── Patterns ─────────────────────────────────────────────────────────

    def _read_pattern(self, offset: int, pattern_id: int) -> PatternRecord:
        if self.data[offset : offset + len(PATTERN_MAGIC)] != PATTERN_MAGIC:
            raise OtParseError(
                f"{self.path}: missing pattern header for pattern {pattern_id + 1}"
            )
        pos = offset + PATTERN_HEADER_SIZE

        audio_tracks = []
        for track_id in range(AUDIO_TRACK_COUNT):
            audio_tracks.append(self._read_audio_track(pos, track_id))
            pos += AUDIO_TRACK_SIZE

        midi_tracks = []
        for track_id in range(MIDI_TRACK_COUNT):
            midi_tracks.append(self._read_midi_track(pos, track_id))
            pos += MIDI_TRACK_SIZE

        trailer = self.data[pos : pos + PATTERN_TRAILER_SIZE]
        scale = PatternScaleRecord(
            master_len_per_track_multiplier=trailer[0],
            master_len_per_track=trailer[1],
            master_scale_per_track=trailer[2],
            master_len=trailer[3],
            master_scale=trailer[4],
            scale_mode=trailer[5],
        )
        return PatternRecord(
            audio_tracks=tuple(audio_tracks),
            midi_tracks=tuple(midi_tracks),
            scale=scale,
            use_project_chain_setting=trailer[6],
            part_assignment=trailer[9],
            tempo_1=trailer[11],
            tempo_2=trailer[12],
        )

    # ── Tracks ───────────────────────────────────────────────────────────

    def _read_masks(self, pos: int, fields) -> tuple[dict[str, bytes], int]:
        masks: dict[str, bytes] = {}
        for name, size in fields:
            masks[name] = bytes(self.data[pos : pos + size])
            pos += size
        masks.pop("unknown", None)
        return masks, pos

    def _read_track_settings(self, pos: int) -> tuple[int, int, int, TrackPatternSettings]:
        raw = self.data[pos : pos + TRACK_SETTINGS_SIZE]
        settings = TrackPatternSettings(
            start_silent=raw[3],
            plays_free=raw[4],
            trig_mode=raw[5],
            trig_quant=raw[6],
            oneshot_trk=raw[7],
        )
        return raw[0], raw[1], raw[2], settings

    def _read_conditions(self, pos: int) -> tuple[tuple[int, int], ...]:
        raw = self.data[pos : pos + CONDITIONS_SIZE]
        return tuple((raw[i], raw[i + 1]) for i in range(0, CONDITIONS_SIZE, 2))

    def _read_audio_track(self, offset: int, track_id: int) -> TrackRecord:
        pos = offset + TRACK_HEADER_SIZE
        masks, pos = self._read_masks(pos, AUDIO_MASK_FIELDS)
        per_track_len, per_track_scale, swing, settings = self._read_track_settings(pos)
        pos += TRACK_SETTINGS_SIZE

        plocks = []
        for step in range(STEP_COUNT):
            entry = self.data[pos + step * PLOCK_ENTRY_SIZE : pos + (step + 1) * PLOCK_ENTRY_SIZE]
            plocks.append(StepLocks(
                machine=tuple(entry[0:6]),
                lfo=tuple(entry[6:12]),
                amp=tuple(entry[12:18]),
                static_slot_id=entry[30],
                flex_slot_id=entry[31],
            ))
        pos += PLOCKS_SIZE + AUDIO_TRACK_TAIL_UNKNOWN

        return TrackRecord(
            track_id=track_id,
            is_midi=False,
            trig_masks=TrigMasks(**masks),
            per_track_len=per_track_len,
            per_track_scale=per_track_scale,
            swing_amount=swing,
            pattern_settings=settings,
            plocks=tuple(plocks),
            offsets_repeats_conditions=self._read_conditions(pos),
        )

    def _read_midi_track(self, offset: int, track_id: int) -> TrackRecord:
        pos = offset + TRACK_HEADER_SIZE
        masks, pos = self._read_masks(pos, MIDI_MASK_FIELDS)
        per_track_len, per_track_scale, swing, settings = self._read_track_settings(pos)
        pos += TRACK_SETTINGS_SIZE

        plocks = []
        for step in range(STEP_COUNT):
            entry = self.data[pos + step * PLOCK_ENTRY_SIZE : pos + (step + 1) * PLOCK_ENTRY_SIZE]
            plocks.append(StepLocks(midi=tuple(entry[0:6]), lfo=tuple(entry[6:12])))
        pos += PLOCKS_SIZE + MIDI_TRACK_TAIL_UNKNOWN

        return TrackRecord(
            track_id=track_id,
            is_midi=True,
            trig_masks=TrigMasks(**masks),
            per_track_len=per_track_len,
            per_track_scale=per_track_scale,
            swing_amount=swing,
            pattern_settings=settings,
            plocks=tuple(plocks),
            offsets_repeats_conditions=self._read_conditions(pos),
        )

    # ── Parts ────────────────────────────────────────────────────────────

    def _read_pages(self, pos: int, pages) -> dict[str, dict[str, int]]:
        """Read consecutive 6-byte pages into {page: {param: value}}."""
        values: dict[str, dict[str, int]] = {}
        for page_name, params in pages:
            raw = self.data[pos : pos + PAGE_SIZE]
            values[page_name] = {
                name: raw[i] for i, name in enumerate(params) if name is not None
            }
            pos += PAGE_SIZE
        return values

    def _read_parts(self) -> PartsRecord:
        parts = []
        offset = PARTS_OFFSET
        for index in range(2 * PART_COUNT):
            parts.append(self._read_part(offset, index))
            offset += PART_SIZE

        state = len(self.data) - BANK_TAIL_SIZE - PARTS_STATE_SIZE
        return PartsRecord(
            unsaved=tuple(parts[:PART_COUNT]),
            saved=tuple(parts[PART_COUNT:]),
            saved_state=tuple(self.data[state : state + PART_COUNT]),
            edited_bitmask=self.data[state + PART_COUNT],
        )

    def _read_part(self, offset: int, index: int) -> PartRecord:
        if self.data[offset : offset + len(PART_MAGIC)] != PART_MAGIC:
            copy = "saved" if index >= PART_COUNT else "unsaved"
            raise OtParseError(
                f"{self.path}: missing part header for {copy} part {index % PART_COUNT + 1}"
            )

        def at(field: str) -> int:
            return offset + PART_FIELD_OFFSETS[field]

        machine_stride = len(MACHINE_PARAM_PAGES) * PAGE_SIZE
        setup_stride = len(MACHINE_SETUP_PAGES) * PAGE_SIZE
        values_stride = len(AUDIO_VALUE_PAGES) * PAGE_SIZE
        audio_setup_stride = len(AUDIO_SETUP_PAGES) * PAGE_SIZE
        midi_setup_stride = len(MIDI_SETUP_PAGES) * PAGE_SIZE

        audio_tracks = []
        for t in range(AUDIO_TRACK_COUNT):
            lfo_start = at("audio_custom_lfo") + t * CUSTOM_LFO_SIZE
            audio_tracks.append(PartAudioTrackRecord(
                track_id=t,
                machine_type=self.data[at("machine_types") + t],
                fx1_type=self.data[at("fx1_types") + t],
                fx2_type=self.data[at("fx2_types") + t],
                machine_params=self._read_pages(
                    at("machine_params") + t * machine_stride, MACHINE_PARAM_PAGES
                ),
                machine_setup=self._read_pages(
                    at("machine_setup") + t * setup_stride, MACHINE_SETUP_PAGES
                ),
                values=self._read_pages(
                    at("audio_values") + t * values_stride, AUDIO_VALUE_PAGES
                ),
                setup=self._read_pages(
                    at("audio_setup") + t * audio_setup_stride, AUDIO_SETUP_PAGES
                ),
                custom_lfo=bytes(self.data[lfo_start : lfo_start + CUSTOM_LFO_SIZE]),
            ))

        midi_tracks = []
        for t in range(MIDI_TRACK_COUNT):
            lfo_start = at("midi_custom_lfo") + t * CUSTOM_LFO_SIZE
            midi_tracks.append(PartMidiTrackRecord(
                track_id=t,
                values=self._read_pages(
                    at("midi_values") + t * MIDI_VALUES_STRIDE, MIDI_VALUE_PAGES
                ),
                setup=self._read_pages(
                    at("midi_setup") + t * midi_setup_stride, MIDI_SETUP_PAGES
                ),
                custom_lfo=bytes(self.data[lfo_start : lfo_start + CUSTOM_LFO_SIZE]),
            ))

        return PartRecord(
            part_id=self.data[offset + PART_ID_OFFSET],
            audio_tracks=tuple(audio_tracks),
            midi_tracks=tuple(midi_tracks),
        )

    def _read_part_names(self) -> tuple[bytes, ...]:
        start = len(self.data) - BANK_TAIL_SIZE
        return tuple(
            bytes(self.data[start + i * PART_NAME_SIZE : start + (i + 1) * PART_NAME_SIZE])
            for i in range(PART_COUNT)
        )


class ProjectParser:
    """Parser for the sectioned text format of Octatrack project files."""

    def __init__(self, project_path: Path):
        self.path = project_path

    def parse(self) -> ProjectRecord:
        with open(self.path, "rb") as f:
            raw = f.read()
        return self.parse_text(raw.decode("latin-1"))

    def parse_text(self, text: str) -> ProjectRecord:
        sections: dict[str, dict[str, str]] = {"META": {}, "SETTINGS": {}, "STATES": {}}
        slots: list[SampleSlotRecord] = []
        current: str | None = None
        block: dict[str, str] = {}

        for line_no, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if line.startswith("[/") and line.endswith("]"):
                name = line[2:-1].upper()
                if name != current:
                    raise OtParseError(
                        f"{self.path}:{line_no}: unexpected closing tag [/{name}]"
                    )
                if current == "SAMPLE":
                    slot = _sample_slot_from_block(block)
                    if slot is not None:
                        slots.append(slot)
                else:
                    sections.setdefault(current, {}).update(block)
                current, block = None, {}
                continue

            if line.startswith("[") and line.endswith("]"):
                if current is not None:
                    raise OtParseError(f"{self.path}:{line_no}: unclosed section [{current}]")
                current, block = line[1:-1].upper(), {}
                continue

            if current is None:
                logger.debug("%s:%d: ignoring text outside a section", self.path, line_no)
                continue

            key, sep, value = line.partition("=")
            if sep:
                block[key.strip().upper()] = value.strip()

        if current is not None:
            raise OtParseError(f"{self.path}: unclosed section [{current}]")
        if "TYPE" not in sections["META"] and not sections["SETTINGS"]:
            raise OtParseError(f"{self.path}: no project sections found")

        return ProjectRecord(
            meta=sections["META"],
            settings=sections["SETTINGS"],
            states=sections["STATES"],
            slots=tuple(slots),
        )


def _sample_slot_from_block(block: dict[str, str]) -> SampleSlotRecord | None:
    """Build a slot record from a [SAMPLE] block; malformed blocks are dropped."""
    try:
        return SampleSlotRecord(
            slot_type=block.get("TYPE", "").upper(),
            slot_id=int(block["SLOT"]),
            path=block.get("PATH", ""),
            gain=int(block.get("GAIN", "72")),
            loop_mode=int(block.get("LOOPMODE", "0")),
            timestretch_mode=int(block.get("TSMODE", "0")),
        )
    except (KeyError, ValueError):
        logger.debug("Dropping malformed sample block: %r", block)
        return None


def parse_bank_file(bank_path: Path) -> BankRecord:
    """Convenience function to parse a bank file."""
    return BankParser(bank_path).parse()


def parse_project_file(project_path: Path) -> ProjectRecord:
    """Convenience function to parse a project file."""
    return ProjectParser(project_path).parse()
