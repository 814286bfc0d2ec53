"""Shared test helpers: Octatrack directory trees and bank file bytes."""

from pathlib import Path

import pytest

from octatools.core import ot_parser as layout
from octatools.core.constants import AUDIO_TRACK_COUNT, PART_COUNT, PATTERN_COUNT

AUDIO_MASK_OFFSETS = {}
_pos = layout.TRACK_HEADER_SIZE
for _name, _size in layout.AUDIO_MASK_FIELDS:
    AUDIO_MASK_OFFSETS[_name] = _pos
    _pos += _size
AUDIO_SETTINGS_OFFSET = _pos
AUDIO_PLOCKS_OFFSET = AUDIO_SETTINGS_OFFSET + layout.TRACK_SETTINGS_SIZE
AUDIO_CONDITIONS_OFFSET = (
    AUDIO_PLOCKS_OFFSET + layout.PLOCKS_SIZE + layout.AUDIO_TRACK_TAIL_UNKNOWN
)

MIDI_MASK_OFFSETS = {}
_pos = layout.TRACK_HEADER_SIZE
for _name, _size in layout.MIDI_MASK_FIELDS:
    MIDI_MASK_OFFSETS[_name] = _pos
    _pos += _size
MIDI_SETTINGS_OFFSET = _pos
MIDI_PLOCKS_OFFSET = MIDI_SETTINGS_OFFSET + layout.TRACK_SETTINGS_SIZE

TRAILER_FIELDS = (
    "master_len_per_track_multiplier", "master_len_per_track", "master_scale_per_track",
    "master_len", "master_scale", "scale_mode", "use_project_chain_setting",
    "chain_unknown", "unknown_1", "part_assignment", "unknown_2", "tempo_1", "tempo_2",
)
TRAILER_DEFAULTS = (0, 15, 2, 16, 2, 0, 1, 0, 0, 0, 0, 11, 64)


class BankBuilder:
    """Builds bank file bytes with every pattern at its default state."""

    def __init__(self):
        header = b"FORM" + bytes(4) + b"DPS1BANK"
        header += bytes(layout.BANK_HEADER_SIZE - len(header))
        self.data = bytearray(header)
        for _ in range(PATTERN_COUNT):
            self.data += self._default_pattern()
        for index in range(2 * PART_COUNT):
            self.data += self._default_part(index % PART_COUNT)
        self.data += bytes(layout.PARTS_STATE_SIZE)
        self.data += bytes(layout.BANK_TAIL_SIZE)

    def _default_part(self, part_id: int) -> bytearray:
        part = bytearray(layout.PART_SIZE)
        part[0:4] = layout.PART_MAGIC
        part[layout.PART_ID_OFFSET] = part_id
        return part

    def _default_track(self, magic: bytes, size: int, settings_offset: int, plocks_offset: int):
        track = bytearray(size)
        track[0:4] = magic
        # per_track_len 16, per_track_scale 1x, swing 0, start_silent off
        track[settings_offset : settings_offset + 4] = bytes([16, 2, 0, 255])
        track[plocks_offset : plocks_offset + layout.PLOCKS_SIZE] = b"\xff" * layout.PLOCKS_SIZE
        return track

    def _default_pattern(self) -> bytearray:
        pattern = bytearray(layout.PATTERN_MAGIC + bytes(4))
        for _ in range(AUDIO_TRACK_COUNT):
            pattern += self._default_track(
                layout.AUDIO_TRACK_MAGIC, layout.AUDIO_TRACK_SIZE,
                AUDIO_SETTINGS_OFFSET, AUDIO_PLOCKS_OFFSET,
            )
        for _ in range(AUDIO_TRACK_COUNT):
            pattern += self._default_track(
                layout.MIDI_TRACK_MAGIC, layout.MIDI_TRACK_SIZE,
                MIDI_SETTINGS_OFFSET, MIDI_PLOCKS_OFFSET,
            )
        pattern += bytes(TRAILER_DEFAULTS)
        return pattern

    # ── Offsets ──────────────────────────────────────────────────────────

    def pattern_offset(self, pattern: int) -> int:
        return layout.BANK_HEADER_SIZE + pattern * layout.PATTERN_SIZE

    def audio_track_offset(self, pattern: int, track: int) -> int:
        return (
            self.pattern_offset(pattern) + layout.PATTERN_HEADER_SIZE
            + track * layout.AUDIO_TRACK_SIZE
        )

    def midi_track_offset(self, pattern: int, track: int) -> int:
        return (
            self.pattern_offset(pattern) + layout.PATTERN_HEADER_SIZE
            + AUDIO_TRACK_COUNT * layout.AUDIO_TRACK_SIZE
            + track * layout.MIDI_TRACK_SIZE
        )

    # ── Edits ────────────────────────────────────────────────────────────

    def set_audio_mask(self, pattern: int, track: int, name: str, value: bytes):
        pos = self.audio_track_offset(pattern, track) + AUDIO_MASK_OFFSETS[name]
        self.data[pos : pos + len(value)] = value
        return self

    def set_midi_mask(self, pattern: int, track: int, name: str, value: bytes):
        pos = self.midi_track_offset(pattern, track) + MIDI_MASK_OFFSETS[name]
        self.data[pos : pos + len(value)] = value
        return self

    def set_audio_settings(self, pattern: int, track: int, *values: int):
        """per_track_len, per_track_scale, swing, start_silent, plays_free,
        trig_mode, trig_quant, oneshot_trk (leading values only)."""
        pos = self.audio_track_offset(pattern, track) + AUDIO_SETTINGS_OFFSET
        self.data[pos : pos + len(values)] = bytes(values)
        return self

    def set_audio_plock(self, pattern: int, track: int, step: int, index: int, value: int):
        """index 0-17: machine, lfo, amp; 30: static slot; 31: flex slot."""
        pos = (
            self.audio_track_offset(pattern, track) + AUDIO_PLOCKS_OFFSET
            + step * layout.PLOCK_ENTRY_SIZE + index
        )
        self.data[pos] = value
        return self

    def set_midi_plock(self, pattern: int, track: int, step: int, index: int, value: int):
        """index 0-5: note, vel, len, not2, not3, not4; 6-11: lfo."""
        pos = (
            self.midi_track_offset(pattern, track) + MIDI_PLOCKS_OFFSET
            + step * layout.PLOCK_ENTRY_SIZE + index
        )
        self.data[pos] = value
        return self

    def set_audio_condition(self, pattern: int, track: int, step: int, first: int, second: int):
        pos = self.audio_track_offset(pattern, track) + AUDIO_CONDITIONS_OFFSET + step * 2
        self.data[pos : pos + 2] = bytes([first, second])
        return self

    def set_trailer(self, pattern: int, **fields: int):
        base = self.pattern_offset(pattern) + layout.PATTERN_SIZE - layout.PATTERN_TRAILER_SIZE
        for name, value in fields.items():
            self.data[base + TRAILER_FIELDS.index(name)] = value
        return self

    def part_offset(self, part: int, saved: bool = False) -> int:
        index = part + PART_COUNT if saved else part
        return layout.PARTS_OFFSET + index * layout.PART_SIZE

    def set_part_byte(self, part: int, field: str, offset: int, value: int, saved: bool = False):
        """Write one byte at ``offset`` inside a part field (see PART_FIELDS)."""
        pos = self.part_offset(part, saved) + layout.PART_FIELD_OFFSETS[field] + offset
        self.data[pos] = value
        return self

    def set_parts_state(self, saved_state: tuple = (0, 0, 0, 0), edited_bitmask: int = 0):
        start = len(self.data) - layout.BANK_TAIL_SIZE - layout.PARTS_STATE_SIZE
        self.data[start : start + layout.PARTS_STATE_SIZE] = bytes(saved_state) + bytes(
            [edited_bitmask]
        )
        return self

    def set_part_name(self, part: int, name: bytes):
        start = len(self.data) - layout.BANK_TAIL_SIZE + part * layout.PART_NAME_SIZE
        field = name[: layout.PART_NAME_SIZE].ljust(layout.PART_NAME_SIZE, b"\x00")
        self.data[start : start + layout.PART_NAME_SIZE] = field
        return self

    def to_bytes(self) -> bytes:
        return bytes(self.data)

    def write(self, path: Path) -> Path:
        path.write_bytes(self.to_bytes())
        return path


PROJECT_TEXT = """[META]
TYPE=OCTATRACK DPS-1 PROJECT
VERSION=19
OS_VERSION=R0177     1.40B
[/META]
############################
# Project Settings
############################
[SETTINGS]
WRITEPROTECTED=0
TEMPOx24=3000
MIDI_CLOCK_SEND=1
MIDI_TRIG_CH1=0
MIDI_TRIG_CH2=-1
MIDI_AUTO_CHANNEL=10
METRONOME_TIME_SIGNATURE=2
METRONOME_TIME_SIGNATURE_DENOMINATOR=3
METRONOME_ENABLED=1
GAIN_AB=70
MAIN_LEVEL=100
RESERVED_RECORDER_COUNT=8
[/SETTINGS]
[STATES]
BANK=1
PATTERN=2
PART=1
TRACK=3
TRACK_MUTE_MASK=5
TRACK_SOLO_MASK=128
MIDI_TRACK_MUTE_MASK=2
[/STATES]
[SAMPLE]
TYPE=STATIC
SLOT=002
PATH=../AUDIO/kick.wav
GAIN=72
LOOPMODE=1
TSMODE=2
[/SAMPLE]
[SAMPLE]
TYPE=STATIC
SLOT=001
PATH=
[/SAMPLE]
[SAMPLE]
TYPE=FLEX
SLOT=005
PATH=loops/break.wav
GAIN=60
LOOPMODE=0
TSMODE=3
[/SAMPLE]
"""


def make_project_dir(base: Path, name: str, with_banks: bool = False) -> Path:
    """Create a project directory holding a project file (and bank01)."""
    project = base / name
    project.mkdir(parents=True, exist_ok=True)
    (project / "project.work").write_text("[META]\nTYPE=OCTATRACK DPS-1 PROJECT\n[/META]\n")
    if with_banks:
        (project / "bank01.work").write_bytes(b"\x00")
    return project


def make_set_dir(base: Path, name: str, projects=("PROJECT1",), samples=("kick.wav",)) -> Path:
    """Create a Set: an AUDIO pool plus project subdirectories."""
    octa_set = base / name
    audio = octa_set / "AUDIO"
    audio.mkdir(parents=True, exist_ok=True)
    for sample in samples:
        target = audio / sample
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"RIFF")
    for project in projects:
        make_project_dir(octa_set, project)
    return octa_set


@pytest.fixture(scope="session")
def default_bank_bytes() -> bytes:
    return BankBuilder().to_bytes()


@pytest.fixture
def bank_builder() -> BankBuilder:
    return BankBuilder()


@pytest.fixture
def octa_tree():
    """Helpers to create Set and Project directories."""
    return {"project": make_project_dir, "set": make_set_dir}


@pytest.fixture
def project_text() -> str:
    return PROJECT_TEXT
