"""Dataclasses for all OctaTools data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class DeviceType(Enum):
    COMPACT_FLASH = "compact_flash"
    LOCAL_COPY = "local_copy"


# ── Library discovery ────────────────────────────────────────────────────


@dataclass(frozen=True)
class OctatrackProject:
    name: str
    path: Path
    has_project_file: bool = False
    has_banks: bool = False


@dataclass(frozen=True)
class OctatrackSet:
    name: str
    path: Path
    has_audio_pool: bool = False
    projects: tuple[OctatrackProject, ...] = ()

    @property
    def project_count(self) -> int:
        return len(self.projects)


@dataclass(frozen=True)
class OctatrackLocation:
    name: str
    path: Path
    device_type: DeviceType = DeviceType.LOCAL_COPY
    sets: tuple[OctatrackSet, ...] = ()

    @property
    def project_count(self) -> int:
        return sum(s.project_count for s in self.sets)


@dataclass(frozen=True)
class ScanResult:
    locations: tuple[OctatrackLocation, ...] = ()
    standalone_projects: tuple[OctatrackProject, ...] = ()

    @property
    def set_count(self) -> int:
        return sum(len(loc.sets) for loc in self.locations)


@dataclass(frozen=True)
class AudioPoolStatus:
    exists: bool
    path: Path | None = None
    set_path: Path | None = None


# ── Sequencer data ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class TrigCounts:
    trigger: int = 0
    trigless: int = 0
    plock: int = 0
    oneshot: int = 0
    swing: int = 0
    slide: int = 0

    @property
    def total(self) -> int:
        return (
            self.trigger + self.trigless + self.plock
            + self.oneshot + self.swing + self.slide
        )

    def __add__(self, other: TrigCounts) -> TrigCounts:
        return TrigCounts(
            trigger=self.trigger + other.trigger,
            trigless=self.trigless + other.trigless,
            plock=self.plock + other.plock,
            oneshot=self.oneshot + other.oneshot,
            swing=self.swing + other.swing,
            slide=self.slide + other.slide,
        )


@dataclass(frozen=True)
class MachineLocks:
    param1: int | None = None
    param2: int | None = None
    param3: int | None = None
    param4: int | None = None
    param5: int | None = None
    param6: int | None = None


@dataclass(frozen=True)
class LfoLocks:
    spd1: int | None = None
    spd2: int | None = None
    spd3: int | None = None
    dep1: int | None = None
    dep2: int | None = None
    dep3: int | None = None


@dataclass(frozen=True)
class AmpLocks:
    atk: int | None = None
    hold: int | None = None
    rel: int | None = None
    vol: int | None = None
    bal: int | None = None
    f: int | None = None


@dataclass(frozen=True)
class AudioParameterLocks:
    """Locked values of one audio step; None means the parameter is not locked."""

    machine: MachineLocks = field(default_factory=MachineLocks)
    lfo: LfoLocks = field(default_factory=LfoLocks)
    amp: AmpLocks = field(default_factory=AmpLocks)
    static_slot_id: int | None = None
    flex_slot_id: int | None = None


@dataclass(frozen=True)
class MidiLocks:
    note: int | None = None
    vel: int | None = None
    len: int | None = None
    not2: int | None = None
    not3: int | None = None
    not4: int | None = None


@dataclass(frozen=True)
class MidiParameterLocks:
    midi: MidiLocks = field(default_factory=MidiLocks)
    lfo: LfoLocks = field(default_factory=LfoLocks)


@dataclass(frozen=True)
class TrigStep:
    step: int
    trigger: bool = False
    trigless: bool = False
    plock: bool = False
    oneshot: bool = False
    swing: bool = False
    slide: bool = False
    recorder: bool = False
    trig_condition: str | None = None
    trig_repeats: int = 0
    micro_timing: str | None = None
    plock_count: int = 0
    sample_slot: int | None = None
    velocity: int | None = None
    # only set on steps with at least one locked parameter
    audio_plocks: AudioParameterLocks | None = None
    midi_plocks: MidiParameterLocks | None = None


@dataclass(frozen=True)
class TrackSettings:
    start_silent: bool = False
    plays_free: bool = False
    trig_mode: str = "ONE"
    trig_quant: str = "TR.LEN"
    oneshot_trk: bool = False


@dataclass(frozen=True)
class TrackInfo:
    track_id: int
    track_type: str  # "Audio" or "MIDI"
    swing_amount: int = 0
    per_track_len: int | None = None
    per_track_scale: str | None = None
    pattern_settings: TrackSettings = field(default_factory=TrackSettings)
    trig_counts: TrigCounts = field(default_factory=TrigCounts)
    steps: tuple[TrigStep, ...] = ()

    @property
    def is_active(self) -> bool:
        return self.trig_counts.trigger > 0


@dataclass(frozen=True)
class PerTrackSettings:
    master_len: str
    master_scale: str


@dataclass(frozen=True)
class Pattern:
    id: int
    name: str
    length: int
    part_assignment: int
    scale_mode: str
    master_scale: str
    chain_mode: str
    tempo_bpm: int | None
    active_tracks: int
    trig_counts: TrigCounts
    per_track_settings: PerTrackSettings | None = None
    tracks: tuple[TrackInfo, ...] = ()

    @property
    def has_swing(self) -> bool:
        return self.trig_counts.swing > 0

    @property
    def tempo_info(self) -> str | None:
        if self.tempo_bpm is None:
            return None
        return f"{self.tempo_bpm} BPM"


@dataclass(frozen=True)
class Part:
    id: int
    name: str
    patterns: tuple[Pattern, ...] = ()


@dataclass(frozen=True)
class Bank:
    index: int
    letter: str
    parts: tuple[Part, ...] = ()

    @property
    def id(self) -> str:
        return self.letter

    @property
    def name(self) -> str:
        return f"Bank {self.letter}"


# ── Part parameters ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class MachineParamValues:
    """SRC page of the track's machine; fields the machine lacks stay None."""

    # static and flex
    ptch: int | None = None
    strt: int | None = None
    len: int | None = None
    rate: int | None = None
    rtrg: int | None = None
    rtim: int | None = None
    # thru
    in_ab: int | None = None
    vol_ab: int | None = None
    in_cd: int | None = None
    vol_cd: int | None = None
    # pickup (with ptch and len)
    dir: int | None = None
    gain: int | None = None
    op: int | None = None


@dataclass(frozen=True)
class MachineSetupValues:
    xloop: int | None = None
    slic: int | None = None
    len: int | None = None
    rate: int | None = None
    tstr: int | None = None
    tsns: int | None = None


@dataclass(frozen=True)
class PartTrackMachine:
    track_id: int
    machine_type: str
    machine_params: MachineParamValues = field(default_factory=MachineParamValues)
    machine_setup: MachineSetupValues = field(default_factory=MachineSetupValues)


@dataclass(frozen=True)
class PartTrackAmp:
    track_id: int
    atk: int = 0
    hold: int = 0
    rel: int = 0
    vol: int = 0
    bal: int = 0
    f: int = 0
    amp_setup_amp: int = 0
    amp_setup_sync: int = 0
    amp_setup_atck: int = 0
    amp_setup_fx1: int = 0
    amp_setup_fx2: int = 0


@dataclass(frozen=True)
class PartTrackLfo:
    track_id: int
    spd1: int = 0
    spd2: int = 0
    spd3: int = 0
    dep1: int = 0
    dep2: int = 0
    dep3: int = 0
    lfo1_pmtr: int = 0
    lfo2_pmtr: int = 0
    lfo3_pmtr: int = 0
    lfo1_wave: int = 0
    lfo2_wave: int = 0
    lfo3_wave: int = 0
    lfo1_mult: int = 0
    lfo2_mult: int = 0
    lfo3_mult: int = 0
    lfo1_trig: int = 0
    lfo2_trig: int = 0
    lfo3_trig: int = 0
    custom_lfo_design: tuple[int, ...] = (0,) * 16


@dataclass(frozen=True)
class PartTrackFx:
    track_id: int
    fx1_type: int = 0
    fx2_type: int = 0
    fx1_param1: int = 0
    fx1_param2: int = 0
    fx1_param3: int = 0
    fx1_param4: int = 0
    fx1_param5: int = 0
    fx1_param6: int = 0
    fx2_param1: int = 0
    fx2_param2: int = 0
    fx2_param3: int = 0
    fx2_param4: int = 0
    fx2_param5: int = 0
    fx2_param6: int = 0
    fx1_setup1: int = 0
    fx1_setup2: int = 0
    fx1_setup3: int = 0
    fx1_setup4: int = 0
    fx1_setup5: int = 0
    fx1_setup6: int = 0
    fx2_setup1: int = 0
    fx2_setup2: int = 0
    fx2_setup3: int = 0
    fx2_setup4: int = 0
    fx2_setup5: int = 0
    fx2_setup6: int = 0


@dataclass(frozen=True)
class PartTrackMidiNote:
    track_id: int
    note: int = 0
    vel: int = 0
    len: int = 0
    not2: int = 0
    not3: int = 0
    not4: int = 0
    chan: int = 0
    bank: int = 0
    prog: int = 0
    sbnk: int = 0


@dataclass(frozen=True)
class PartTrackMidiArp:
    track_id: int
    tran: int = 0
    leg: int = 0
    mode: int = 0
    spd: int = 0
    rnge: int = 0
    nlen: int = 0
    len: int = 0
    key: int = 0


@dataclass(frozen=True)
class PartTrackMidiCtrl1:
    track_id: int
    pb: int = 0
    at: int = 0
    cc1: int = 0
    cc2: int = 0
    cc3: int = 0
    cc4: int = 0
    cc1_num: int = 0
    cc2_num: int = 0
    cc3_num: int = 0
    cc4_num: int = 0


@dataclass(frozen=True)
class PartTrackMidiCtrl2:
    track_id: int
    cc5: int = 0
    cc6: int = 0
    cc7: int = 0
    cc8: int = 0
    cc9: int = 0
    cc10: int = 0
    cc5_num: int = 0
    cc6_num: int = 0
    cc7_num: int = 0
    cc8_num: int = 0
    cc9_num: int = 0
    cc10_num: int = 0


@dataclass(frozen=True)
class PartData:
    part_id: int
    machines: tuple[PartTrackMachine, ...] = ()
    amps: tuple[PartTrackAmp, ...] = ()
    lfos: tuple[PartTrackLfo, ...] = ()
    fxs: tuple[PartTrackFx, ...] = ()
    midi_notes: tuple[PartTrackMidiNote, ...] = ()
    midi_arps: tuple[PartTrackMidiArp, ...] = ()
    midi_lfos: tuple[PartTrackLfo, ...] = ()
    midi_ctrl1s: tuple[PartTrackMidiCtrl1, ...] = ()
    midi_ctrl2s: tuple[PartTrackMidiCtrl2, ...] = ()


@dataclass(frozen=True)
class PartsData:
    """Working state of a bank's four parts.

    ``parts_edited_bitmask`` has bit N set when part N+1 has unsaved edits;
    ``parts_saved_state`` is 1 for each part holding a saved copy to reload.
    """

    parts: tuple[PartData, ...] = ()
    parts_edited_bitmask: int = 0
    parts_saved_state: tuple[int, ...] = (0, 0, 0, 0)


# ── Project metadata ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class CurrentState:
    bank: int = 0
    bank_name: str = "A"
    pattern: int = 0
    part: int = 0
    track: int = 0
    track_othermode: int = 0
    midi_mode: int = 0
    audio_muted_tracks: tuple[int, ...] = ()
    audio_soloed_tracks: tuple[int, ...] = ()
    audio_cued_tracks: tuple[int, ...] = ()
    midi_muted_tracks: tuple[int, ...] = ()
    midi_soloed_tracks: tuple[int, ...] = ()


@dataclass(frozen=True)
class MixerSettings:
    gain_ab: int = 64
    gain_cd: int = 64
    dir_ab: int = 0
    dir_cd: int = 0
    phones_mix: int = 64
    main_level: int = 64
    cue_level: int = 64


@dataclass(frozen=True)
class MemorySettings:
    load_24bit_flex: bool = False
    dynamic_recorders: bool = False
    record_24bit: bool = False
    reserved_recorder_count: int = 0
    reserved_recorder_length: int = 0


@dataclass(frozen=True)
class MidiSettings:
    trig_channels: tuple[int, ...] = ()  # 1-16, -1 = disabled
    auto_channel: int = -1
    clock_send: bool = False
    clock_receive: bool = False
    transport_send: bool = False
    transport_receive: bool = False
    prog_change_send: bool = False
    prog_change_send_channel: int = -1
    prog_change_receive: bool = False
    prog_change_receive_channel: int = -1


@dataclass(frozen=True)
class MetronomeSettings:
    enabled: bool = False
    main_volume: int = 0
    cue_volume: int = 0
    pitch: int = 0
    tonal: bool = False
    preroll: int = 0
    time_signature_numerator: int = 4
    time_signature_denominator: int = 4


@dataclass(frozen=True)
class SampleSlot:
    slot_id: int
    slot_type: str
    path: str
    gain: int
    loop_mode: str
    timestretch_mode: str
    source_location: str
    file_exists: bool = False


@dataclass(frozen=True)
class ProjectMetadata:
    name: str
    tempo: float
    time_signature: str
    pattern_length: int
    current_state: CurrentState = field(default_factory=CurrentState)
    mixer_settings: MixerSettings = field(default_factory=MixerSettings)
    memory_settings: MemorySettings = field(default_factory=MemorySettings)
    midi_settings: MidiSettings = field(default_factory=MidiSettings)
    metronome_settings: MetronomeSettings = field(default_factory=MetronomeSettings)
    static_slots: tuple[SampleSlot, ...] = ()
    flex_slots: tuple[SampleSlot, ...] = ()
    os_version: str = ""
