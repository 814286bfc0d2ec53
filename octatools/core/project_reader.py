"""Build the sequencer model and project metadata from parsed Octatrack files.

``read_project_metadata``, ``read_project_banks`` and ``read_parts_data`` are
the entry points. They read files through ``octatools.core.ot_parser`` and
turn the raw records into ``octatools.core.models`` objects: trig masks
become per-step flags, hardware codes become labels, and per-track and
per-pattern statistics are derived.
"""

from __future__ import annotations

import logging
from pathlib import Path

from octatools.core.constants import (
    AUDIO_POOL_NAME,
    BANK_COUNT,
    BANK_LETTERS,
    CHAIN_MODE_PATTERN,
    CHAIN_MODE_PROJECT,
    DEFAULT_PATTERN_LENGTH,
    DEFAULT_PATTERN_TEMPO,
    DEFAULT_SCALE_LABEL,
    DEFAULT_SCALE_MODE_LABEL,
    DEFAULT_TRIG_MODE_LABEL,
    DEFAULT_TRIG_QUANT_LABEL,
    INFINITE_LENGTH_BYTES,
    INFINITE_LENGTH_LABEL,
    LOOP_MODE_LABELS,
    MACHINE_TYPES,
    PART_COUNT,
    PER_TRACK_SCALE_MODE,
    PLOCK_UNSET,
    PROJECT_FILE_NAMES,
    SCALE_LABELS,
    SCALE_MODE_LABELS,
    SLOT_TYPE_FLEX,
    SLOT_TYPE_STATIC,
    SOURCE_AUDIO_POOL,
    SOURCE_PROJECT,
    STEP_COUNT,
    TIMESTRETCH_MODE_LABELS,
    TRIG_MODE_LABELS,
    TRIG_QUANT_DIRECT_CODE,
    TRIG_QUANT_DIRECT_LABEL,
    TRIG_QUANT_LABELS,
    UNKNOWN_MACHINE_TYPE,
    bank_file_names,
)
from octatools.core.errors import OtParseError, ProjectReadError
from octatools.core.models import (
    AmpLocks,
    AudioParameterLocks,
    Bank,
    CurrentState,
    LfoLocks,
    MachineLocks,
    MachineParamValues,
    MachineSetupValues,
    MemorySettings,
    MetronomeSettings,
    MidiLocks,
    MidiParameterLocks,
    MidiSettings,
    MixerSettings,
    Part,
    PartData,
    PartsData,
    PartTrackAmp,
    PartTrackFx,
    PartTrackLfo,
    PartTrackMachine,
    PartTrackMidiArp,
    PartTrackMidiCtrl1,
    PartTrackMidiCtrl2,
    PartTrackMidiNote,
    Pattern,
    PerTrackSettings,
    ProjectMetadata,
    SampleSlot,
    TrackInfo,
    TrackSettings,
    TrigCounts,
    TrigStep,
)
from octatools.core.ot_parser import parse_bank_file, parse_project_file
from octatools.core.records import (
    BankRecord,
    PartAudioTrackRecord,
    PartRecord,
    PatternRecord,
    ProjectRecord,
    SampleSlotRecord,
    StepLocks,
    TrackRecord,
)
from octatools.core.trig_decoder import (
    count_trigs,
    decode_micro_timing,
    decode_trig_condition,
    decode_trig_masks,
    is_track_active,
    trig_repeats,
)

logger = logging.getLogger(__name__)


# ── Code tables ──────────────────────────────────────────────────────────


def scale_label(code: int) -> str:
    return SCALE_LABELS.get(code, DEFAULT_SCALE_LABEL)


def is_per_track_scale(code: int) -> bool:
    return code == PER_TRACK_SCALE_MODE


def scale_mode_label(code: int) -> str:
    return SCALE_MODE_LABELS.get(code, DEFAULT_SCALE_MODE_LABEL)


def chain_mode_label(use_project_setting: int) -> str:
    return CHAIN_MODE_PROJECT if use_project_setting == 1 else CHAIN_MODE_PATTERN


def trig_mode_label(code: int) -> str:
    return TRIG_MODE_LABELS.get(code, DEFAULT_TRIG_MODE_LABEL)


def trig_quant_label(code: int) -> str:
    if code == TRIG_QUANT_DIRECT_CODE:
        return TRIG_QUANT_DIRECT_LABEL
    if 0 <= code < len(TRIG_QUANT_LABELS):
        return TRIG_QUANT_LABELS[code]
    return DEFAULT_TRIG_QUANT_LABEL


def pattern_tempo(tempo_1: int, tempo_2: int) -> int | None:
    """BPM of a pattern with its own tempo, None when it follows the project."""
    if (tempo_1, tempo_2) == DEFAULT_PATTERN_TEMPO:
        return None
    return (tempo_1 + 1) * 10


def per_track_master_length(length_byte: int, multiplier_byte: int) -> str:
    if (length_byte, multiplier_byte) == INFINITE_LENGTH_BYTES:
        return INFINITE_LENGTH_LABEL
    return str((length_byte + 1) * (multiplier_byte + 1))


def part_name(raw: bytes, part_id: int) -> str:
    """Decode a fixed-width, null-terminated part name."""
    end = raw.find(b"\x00")
    if end != -1:
        raw = raw[:end]
    name = raw.decode("utf-8", errors="replace").strip()
    return name or f"Part {part_id + 1}"


# ── Bank decoding ────────────────────────────────────────────────────────


def _track_trig_counts(track: TrackRecord) -> TrigCounts:
    masks = track.trig_masks
    if track.is_midi:
        return TrigCounts(
            trigger=count_trigs(masks.trigger),
            trigless=count_trigs(masks.trigless),
            plock=count_trigs(masks.plock),
            swing=count_trigs(masks.swing),
        )
    return TrigCounts(
        trigger=count_trigs(masks.trigger),
        trigless=count_trigs(masks.trigless),
        plock=count_trigs(masks.plock),
        oneshot=count_trigs(masks.oneshot),
        swing=count_trigs(masks.swing),
        slide=count_trigs(masks.slide),
    )


def _locked(values) -> int:
    return sum(1 for v in values if v != PLOCK_UNSET)


def _audio_step_locks(locks: StepLocks) -> tuple[int, int | None, int | None]:
    """(plock count, locked sample slot, locked volume) of an audio step."""
    count = (
        _locked(locks.machine) + _locked(locks.lfo) + _locked(locks.amp)
        + _locked((locks.static_slot_id, locks.flex_slot_id))
    )
    if locks.static_slot_id != PLOCK_UNSET:
        slot = locks.static_slot_id
    elif locks.flex_slot_id != PLOCK_UNSET:
        slot = locks.flex_slot_id
    else:
        slot = None
    volume = locks.volume if locks.volume != PLOCK_UNSET else None
    return count, slot, volume


def _midi_step_locks(locks: StepLocks) -> tuple[int, int | None]:
    """(plock count, locked velocity) of a MIDI step."""
    count = _locked(locks.midi) + _locked(locks.lfo)
    velocity = locks.midi[1] if locks.midi[1] != PLOCK_UNSET else None
    return count, velocity


def _lock_value(value: int) -> int | None:
    return None if value == PLOCK_UNSET else value


def _lock_values(values) -> list[int | None]:
    return [_lock_value(v) for v in values]


def audio_parameter_locks(locks: StepLocks) -> AudioParameterLocks:
    return AudioParameterLocks(
        machine=MachineLocks(*_lock_values(locks.machine)),
        lfo=LfoLocks(*_lock_values(locks.lfo)),
        amp=AmpLocks(*_lock_values(locks.amp)),
        static_slot_id=_lock_value(locks.static_slot_id),
        flex_slot_id=_lock_value(locks.flex_slot_id),
    )


def midi_parameter_locks(locks: StepLocks) -> MidiParameterLocks:
    return MidiParameterLocks(
        midi=MidiLocks(*_lock_values(locks.midi)),
        lfo=LfoLocks(*_lock_values(locks.lfo)),
    )


def _build_steps(track: TrackRecord) -> tuple[TrigStep, ...]:
    masks = track.trig_masks
    trigger = decode_trig_masks(masks.trigger)
    trigless = decode_trig_masks(masks.trigless)
    plock = decode_trig_masks(masks.plock)
    swing = decode_trig_masks(masks.swing)
    if track.is_midi:
        oneshot = slide = recorder = (False,) * STEP_COUNT
    else:
        oneshot = decode_trig_masks(masks.oneshot)
        slide = decode_trig_masks(masks.slide)
        recorder = decode_trig_masks(masks.recorder)

    steps = []
    for step in range(STEP_COUNT):
        condition_bytes = track.condition_bytes_at(step)
        locks = track.locks_at(step)
        audio_plocks = midi_plocks = None
        if track.is_midi:
            plock_count, velocity = _midi_step_locks(locks)
            sample_slot = None
            if plock_count:
                midi_plocks = midi_parameter_locks(locks)
        else:
            plock_count, sample_slot, velocity = _audio_step_locks(locks)
            if plock_count:
                audio_plocks = audio_parameter_locks(locks)

        steps.append(TrigStep(
            step=step,
            trigger=trigger[step],
            trigless=trigless[step],
            plock=plock[step],
            oneshot=oneshot[step],
            swing=swing[step],
            slide=slide[step],
            recorder=recorder[step],
            trig_condition=decode_trig_condition(condition_bytes[1]),
            trig_repeats=trig_repeats(condition_bytes[0]),
            micro_timing=decode_micro_timing(condition_bytes),
            plock_count=plock_count,
            sample_slot=sample_slot,
            velocity=velocity,
            audio_plocks=audio_plocks,
            midi_plocks=midi_plocks,
        ))
    return tuple(steps)


def build_track(track: TrackRecord, per_track_mode: bool) -> TrackInfo:
    """Decode one track of a pattern."""
    settings = track.pattern_settings
    return TrackInfo(
        track_id=track.track_id + 8 if track.is_midi else track.track_id,
        track_type="MIDI" if track.is_midi else "Audio",
        swing_amount=track.swing_amount,
        per_track_len=track.per_track_len if per_track_mode else None,
        per_track_scale=scale_label(track.per_track_scale) if per_track_mode else None,
        pattern_settings=TrackSettings(
            start_silent=settings.start_silent != 255,
            plays_free=settings.plays_free != 0,
            trig_mode=trig_mode_label(settings.trig_mode),
            trig_quant=trig_quant_label(settings.trig_quant),
            oneshot_trk=settings.oneshot_trk != 0,
        ),
        trig_counts=_track_trig_counts(track),
        steps=_build_steps(track),
    )


def build_pattern(record: PatternRecord, pattern_id: int) -> Pattern:
    """Decode one pattern with its 8 audio and 8 MIDI tracks."""
    scale = record.scale
    per_track_mode = is_per_track_scale(scale.scale_mode)

    tracks = tuple(
        build_track(track, per_track_mode)
        for track in record.audio_tracks + record.midi_tracks
    )

    trig_counts = TrigCounts()
    for track in tracks:
        trig_counts += track.trig_counts

    active_tracks = sum(
        1 for track in record.audio_tracks + record.midi_tracks
        if is_track_active(track.trig_masks.trigger)
    )

    per_track_settings = None
    if per_track_mode:
        per_track_settings = PerTrackSettings(
            master_len=per_track_master_length(
                scale.master_len_per_track, scale.master_len_per_track_multiplier
            ),
            master_scale=scale_label(scale.master_scale_per_track),
        )

    return Pattern(
        id=pattern_id,
        name=f"Pattern {pattern_id + 1}",
        length=scale.master_len,
        part_assignment=record.part_assignment,
        scale_mode=scale_mode_label(scale.scale_mode),
        master_scale=scale_label(scale.master_scale),
        chain_mode=chain_mode_label(record.use_project_chain_setting),
        tempo_bpm=pattern_tempo(record.tempo_1, record.tempo_2),
        active_tracks=active_tracks,
        trig_counts=trig_counts,
        per_track_settings=per_track_settings,
        tracks=tracks,
    )


def build_bank(record: BankRecord, bank_index: int) -> Bank:
    """Decode a bank record into 4 parts, each listing the bank's 16 patterns.

    Patterns are shared between parts; each one names its part through
    ``part_assignment``.
    """
    patterns = tuple(
        build_pattern(pattern, pattern_id)
        for pattern_id, pattern in enumerate(record.patterns)
    )
    parts = []
    for part_id in range(PART_COUNT):
        raw_name = record.part_names[part_id] if part_id < len(record.part_names) else b""
        parts.append(Part(id=part_id, name=part_name(raw_name, part_id), patterns=patterns))
    return Bank(index=bank_index, letter=BANK_LETTERS[bank_index], parts=tuple(parts))


# ── Bank files ───────────────────────────────────────────────────────────


def find_bank_file(project_dir: Path, bank_index: int) -> Path | None:
    """The bank's work file, else its saved file, else None."""
    for name in bank_file_names(bank_index):
        candidate = project_dir / name
        if candidate.is_file():
            return candidate
    return None


def get_existing_bank_indices(project_dir: Path) -> list[int]:
    """0-based indices of the banks that have a file on disk."""
    return [i for i in range(BANK_COUNT) if find_bank_file(project_dir, i) is not None]


def read_project_banks(project_dir: Path) -> list[Bank]:
    """Decode every bank of a project.

    Missing banks are skipped; a bank that fails to parse is logged and
    skipped without affecting the others.
    """
    project_dir = Path(project_dir)
    banks: list[Bank] = []

    for bank_index in range(BANK_COUNT):
        bank_path = find_bank_file(project_dir, bank_index)
        if bank_path is None:
            continue
        try:
            record = parse_bank_file(bank_path)
        except (OSError, OtParseError) as e:
            logger.warning("Failed to read bank %s: %s", BANK_LETTERS[bank_index], e)
            continue
        banks.append(build_bank(record, bank_index))
        logger.debug("Bank %s loaded from %s", BANK_LETTERS[bank_index], bank_path)

    return banks


def read_single_bank(project_dir: Path, bank_index: int) -> Bank | None:
    """Decode one bank (0-15 = A-P). None if the project has no such bank file."""
    if not 0 <= bank_index < BANK_COUNT:
        raise ValueError(f"Invalid bank index: {bank_index}. Must be 0-{BANK_COUNT - 1}.")

    bank_path = find_bank_file(Path(project_dir), bank_index)
    if bank_path is None:
        return None
    try:
        record = parse_bank_file(bank_path)
    except (OSError, OtParseError) as e:
        raise ProjectReadError(
            f"Failed to read bank {BANK_LETTERS[bank_index]}: {e}"
        ) from e
    return build_bank(record, bank_index)


# ── Part parameters ──────────────────────────────────────────────────────


def machine_type_label(code: int) -> str:
    return MACHINE_TYPES.get(code, UNKNOWN_MACHINE_TYPE)


def _part_machine(track: PartAudioTrackRecord) -> PartTrackMachine:
    """Only the pages of the track's own machine are filled in."""
    label = machine_type_label(track.machine_type)
    variant = label.lower()
    return PartTrackMachine(
        track_id=track.track_id,
        machine_type=label,
        machine_params=MachineParamValues(**track.machine_params.get(variant, {})),
        machine_setup=MachineSetupValues(**track.machine_setup.get(variant, {})),
    )


def _part_lfo(track_id: int, values: dict, setup_1: dict, setup_2: dict, design: bytes):
    return PartTrackLfo(
        track_id=track_id, **values, **setup_1, **setup_2,
        custom_lfo_design=tuple(design),
    )


def _part_fx(track: PartAudioTrackRecord) -> PartTrackFx:
    params = {}
    for fx in ("fx1", "fx2"):
        for i in range(1, 7):
            params[f"{fx}_param{i}"] = track.values[fx][f"param_{i}"]
            params[f"{fx}_setup{i}"] = track.setup[fx][f"setting{i}"]
    return PartTrackFx(
        track_id=track.track_id,
        fx1_type=track.fx1_type,
        fx2_type=track.fx2_type,
        **params,
    )


def build_part_data(part: PartRecord) -> PartData:
    """Group a part's raw parameter pages by what they control."""
    audio = part.audio_tracks
    midi = part.midi_tracks
    return PartData(
        part_id=part.part_id,
        machines=tuple(_part_machine(t) for t in audio),
        amps=tuple(
            PartTrackAmp(
                track_id=t.track_id,
                **t.values["amp"],
                **{f"amp_setup_{k}": v for k, v in t.setup["amp"].items()},
            )
            for t in audio
        ),
        lfos=tuple(
            _part_lfo(
                t.track_id, t.values["lfo"], t.setup["lfo_setup_1"],
                t.setup["lfo_setup_2"], t.custom_lfo,
            )
            for t in audio
        ),
        fxs=tuple(_part_fx(t) for t in audio),
        midi_notes=tuple(
            PartTrackMidiNote(track_id=t.track_id, **t.values["midi"], **t.setup["note"])
            for t in midi
        ),
        midi_arps=tuple(
            PartTrackMidiArp(track_id=t.track_id, **t.values["arp"], **t.setup["arp"])
            for t in midi
        ),
        midi_lfos=tuple(
            _part_lfo(t.track_id, t.values["lfo"], t.setup["lfo1"], t.setup["lfo2"], t.custom_lfo)
            for t in midi
        ),
        midi_ctrl1s=tuple(
            PartTrackMidiCtrl1(track_id=t.track_id, **t.values["ctrl1"], **t.setup["ctrl1"])
            for t in midi
        ),
        midi_ctrl2s=tuple(
            PartTrackMidiCtrl2(track_id=t.track_id, **t.values["ctrl2"], **t.setup["ctrl2"])
            for t in midi
        ),
    )


def bank_index_from_letter(bank_id: str) -> int:
    """'A'-'P' (any case) -> 0-15."""
    letter = bank_id.strip().upper()
    if len(letter) != 1 or letter not in BANK_LETTERS:
        raise ValueError(f"Invalid bank ID: {bank_id!r}. Must be A-P.")
    return BANK_LETTERS.index(letter)


def read_parts_data(project_dir: Path, bank_id: str) -> PartsData:
    """Decode the working (unsaved) state of the four parts of bank ``bank_id``.

    These are the values the device loads; saved copies are only used when
    a part is reloaded. Raises ValueError for a bank letter outside A-P and
    ProjectReadError when the bank file is missing or unreadable.
    """
    bank_index = bank_index_from_letter(bank_id)
    bank_path = find_bank_file(Path(project_dir), bank_index)
    if bank_path is None:
        raise ProjectReadError(f"Bank file not found: {BANK_LETTERS[bank_index]}")
    try:
        record = parse_bank_file(bank_path)
    except (OSError, OtParseError) as e:
        raise ProjectReadError(
            f"Failed to read bank {BANK_LETTERS[bank_index]}: {e}"
        ) from e

    parts = record.parts
    return PartsData(
        parts=tuple(build_part_data(part) for part in parts.unsaved),
        parts_edited_bitmask=parts.edited_bitmask,
        parts_saved_state=parts.saved_state,
    )


# ── Project metadata ─────────────────────────────────────────────────────


def find_project_file(project_dir: Path) -> Path | None:
    for name in PROJECT_FILE_NAMES:
        candidate = project_dir / name
        if candidate.is_file():
            return candidate
    return None


def _mask_to_tracks(mask: int, track_count: int = 8) -> tuple[int, ...]:
    return tuple(i for i in range(track_count) if mask & (1 << i))


def _midi_channel(raw: int) -> int:
    """Stored 0-15 (or negative when off) -> 1-16, -1 = disabled."""
    return raw + 1 if raw >= 0 else -1


def _current_state(record: ProjectRecord) -> CurrentState:
    bank = record.state("BANK")
    return CurrentState(
        bank=bank,
        bank_name=BANK_LETTERS[bank] if 0 <= bank < BANK_COUNT else "A",
        pattern=record.state("PATTERN"),
        part=record.state("PART"),
        track=record.state("TRACK"),
        track_othermode=record.state("TRACK_OTHERMODE"),
        midi_mode=record.state("MIDI_MODE"),
        audio_muted_tracks=_mask_to_tracks(record.state("TRACK_MUTE_MASK")),
        audio_soloed_tracks=_mask_to_tracks(record.state("TRACK_SOLO_MASK")),
        audio_cued_tracks=_mask_to_tracks(record.state("TRACK_CUE_MASK")),
        midi_muted_tracks=_mask_to_tracks(record.state("MIDI_TRACK_MUTE_MASK")),
        midi_soloed_tracks=_mask_to_tracks(record.state("MIDI_TRACK_SOLO_MASK")),
    )


def _mixer_settings(record: ProjectRecord) -> MixerSettings:
    return MixerSettings(
        gain_ab=record.setting("GAIN_AB", 64),
        gain_cd=record.setting("GAIN_CD", 64),
        dir_ab=record.setting("DIR_AB"),
        dir_cd=record.setting("DIR_CD"),
        phones_mix=record.setting("PHONES_MIX", 64),
        main_level=record.setting("MAIN_LEVEL", 64),
        cue_level=record.setting("CUE_LEVEL", 64),
    )


def _memory_settings(record: ProjectRecord) -> MemorySettings:
    return MemorySettings(
        load_24bit_flex=record.setting("LOAD_24BIT_FLEX") != 0,
        dynamic_recorders=record.setting("DYNAMIC_RECORDERS") != 0,
        record_24bit=record.setting("RECORD_24BIT") != 0,
        reserved_recorder_count=record.setting("RESERVED_RECORDER_COUNT"),
        reserved_recorder_length=record.setting("RESERVED_RECORDER_LENGTH"),
    )


def _midi_settings(record: ProjectRecord) -> MidiSettings:
    return MidiSettings(
        trig_channels=tuple(
            _midi_channel(record.setting(f"MIDI_TRIG_CH{i}", i - 1)) for i in range(1, 9)
        ),
        auto_channel=_midi_channel(record.setting("MIDI_AUTO_CHANNEL", -1)),
        clock_send=record.setting("MIDI_CLOCK_SEND") != 0,
        clock_receive=record.setting("MIDI_CLOCK_RECEIVE") != 0,
        transport_send=record.setting("MIDI_TRANSPORT_SEND") != 0,
        transport_receive=record.setting("MIDI_TRANSPORT_RECEIVE") != 0,
        prog_change_send=record.setting("MIDI_PROGRAM_CHANGE_SEND") != 0,
        prog_change_send_channel=_midi_channel(
            record.setting("MIDI_PROGRAM_CHANGE_SEND_CH", -1)
        ),
        prog_change_receive=record.setting("MIDI_PROGRAM_CHANGE_RECEIVE") != 0,
        prog_change_receive_channel=_midi_channel(
            record.setting("MIDI_PROGRAM_CHANGE_RECEIVE_CH", -1)
        ),
    )


def _metronome_settings(record: ProjectRecord) -> MetronomeSettings:
    return MetronomeSettings(
        enabled=record.setting("METRONOME_ENABLED") != 0,
        main_volume=record.setting("METRONOME_MAIN_VOLUME"),
        cue_volume=record.setting("METRONOME_CUE_VOLUME"),
        pitch=record.setting("METRONOME_PITCH"),
        tonal=record.setting("METRONOME_TONAL") != 0,
        preroll=record.setting("METRONOME_PREROLL"),
        time_signature_numerator=record.setting("METRONOME_TIME_SIGNATURE", 3) + 1,
        time_signature_denominator=2 ** record.setting(
            "METRONOME_TIME_SIGNATURE_DENOMINATOR", 2
        ),
    )


def _source_location(sample_path: str) -> str:
    normalized = sample_path.replace("\\", "/")
    if normalized.startswith(f"{AUDIO_POOL_NAME}/") or f"/{AUDIO_POOL_NAME}/" in normalized:
        return SOURCE_AUDIO_POOL
    return SOURCE_PROJECT


def _sample_slot(slot: SampleSlotRecord, project_dir: Path) -> SampleSlot:
    slot_type = SLOT_TYPE_FLEX if slot.slot_type == "FLEX" else SLOT_TYPE_STATIC
    return SampleSlot(
        slot_id=slot.slot_id,
        slot_type=slot_type,
        path=slot.path,
        gain=slot.gain,
        loop_mode=LOOP_MODE_LABELS.get(slot.loop_mode, str(slot.loop_mode)),
        timestretch_mode=TIMESTRETCH_MODE_LABELS.get(
            slot.timestretch_mode, str(slot.timestretch_mode)
        ),
        source_location=_source_location(slot.path),
        file_exists=(project_dir / slot.path.replace("\\", "/")).exists(),
    )


def _sample_slots(record: ProjectRecord, project_dir: Path) -> tuple[tuple, tuple]:
    """(static, flex) slots sorted by id; slots without a sample are left out."""
    static_slots: list[SampleSlot] = []
    flex_slots: list[SampleSlot] = []
    for slot in sorted(record.slots, key=lambda s: s.slot_id):
        if not slot.path:
            continue
        decoded = _sample_slot(slot, project_dir)
        if decoded.slot_type == SLOT_TYPE_FLEX:
            flex_slots.append(decoded)
        else:
            static_slots.append(decoded)
    return tuple(static_slots), tuple(flex_slots)


def _current_pattern_length(project_dir: Path, state: CurrentState) -> int:
    """Length of the pattern the project currently points at (16 if unknown)."""
    if not 0 <= state.bank < BANK_COUNT:
        return DEFAULT_PATTERN_LENGTH
    bank_path = find_bank_file(project_dir, state.bank)
    if bank_path is None:
        return DEFAULT_PATTERN_LENGTH
    try:
        record = parse_bank_file(bank_path)
    except (OSError, OtParseError) as e:
        logger.debug("Current bank unreadable, using default length: %s", e)
        return DEFAULT_PATTERN_LENGTH
    if not 0 <= state.pattern < len(record.patterns):
        return DEFAULT_PATTERN_LENGTH
    return record.patterns[state.pattern].scale.master_len


def read_project_metadata(project_dir: Path) -> ProjectMetadata:
    """Read tempo, state, mixer and sample slot data of a project.

    Raises ProjectReadError when the project file is missing or unreadable.
    """
    project_dir = Path(project_dir)
    project_file = find_project_file(project_dir)
    if project_file is None:
        raise ProjectReadError(f"No project file found in {project_dir}")

    try:
        record = parse_project_file(project_file)
    except (OSError, OtParseError) as e:
        raise ProjectReadError(f"Failed to read project file {project_file}: {e}") from e

    metronome = _metronome_settings(record)
    state = _current_state(record)
    static_slots, flex_slots = _sample_slots(record, project_dir)

    return ProjectMetadata(
        name=project_dir.name or "Unknown",
        tempo=record.setting("TEMPOX24", 2880) / 24,
        time_signature=(
            f"{metronome.time_signature_numerator}/{metronome.time_signature_denominator}"
        ),
        pattern_length=_current_pattern_length(project_dir, state),
        current_state=state,
        mixer_settings=_mixer_settings(record),
        memory_settings=_memory_settings(record),
        midi_settings=_midi_settings(record),
        metronome_settings=metronome,
        static_slots=static_slots,
        flex_slots=flex_slots,
        os_version=record.meta.get("OS_VERSION", ""),
    )
