"""Export scan results and decoded project data to JSON."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from octatools.core.models import (
    Bank,
    OctatrackLocation,
    OctatrackProject,
    OctatrackSet,
    PartsData,
    Pattern,
    ProjectMetadata,
    SampleSlot,
    ScanResult,
    TrackInfo,
    TrigCounts,
    TrigStep,
)

# ── Discovery ────────────────────────────────────────────────────────────


def project_to_dict(project: OctatrackProject) -> dict:
    return {
        "name": project.name,
        "path": str(project.path),
        "has_project_file": project.has_project_file,
        "has_banks": project.has_banks,
    }


def set_to_dict(octa_set: OctatrackSet) -> dict:
    return {
        "name": octa_set.name,
        "path": str(octa_set.path),
        "has_audio_pool": octa_set.has_audio_pool,
        "projects": [project_to_dict(p) for p in octa_set.projects],
    }


def location_to_dict(location: OctatrackLocation) -> dict:
    return {
        "name": location.name,
        "path": str(location.path),
        "device_type": location.device_type.value,
        "sets": [set_to_dict(s) for s in location.sets],
    }


def scan_result_to_dict(result: ScanResult) -> dict:
    """Convert a ScanResult to a serializable dict."""
    return {
        "locations": [location_to_dict(loc) for loc in result.locations],
        "standalone_projects": [project_to_dict(p) for p in result.standalone_projects],
    }


# ── Project metadata ─────────────────────────────────────────────────────


def _slot_to_dict(slot: SampleSlot) -> dict:
    return asdict(slot)


def metadata_to_dict(metadata: ProjectMetadata) -> dict:
    """Convert ProjectMetadata to a serializable dict."""
    return {
        "name": metadata.name,
        "tempo": metadata.tempo,
        "time_signature": metadata.time_signature,
        "pattern_length": metadata.pattern_length,
        "current_state": asdict(metadata.current_state),
        "mixer_settings": asdict(metadata.mixer_settings),
        "memory_settings": asdict(metadata.memory_settings),
        "midi_settings": asdict(metadata.midi_settings),
        "metronome_settings": asdict(metadata.metronome_settings),
        "sample_slots": {
            "static_slots": [_slot_to_dict(s) for s in metadata.static_slots],
            "flex_slots": [_slot_to_dict(s) for s in metadata.flex_slots],
        },
        "os_version": metadata.os_version,
    }


# ── Banks ────────────────────────────────────────────────────────────────


def _counts_to_dict(counts: TrigCounts) -> dict:
    result = asdict(counts)
    result["total"] = counts.total
    return result


def _step_to_dict(step: TrigStep) -> dict:
    return asdict(step)


def _track_to_dict(track: TrackInfo) -> dict:
    return {
        "track_id": track.track_id,
        "track_type": track.track_type,
        "swing_amount": track.swing_amount,
        "per_track_len": track.per_track_len,
        "per_track_scale": track.per_track_scale,
        "pattern_settings": asdict(track.pattern_settings),
        "trig_counts": _counts_to_dict(track.trig_counts),
        "steps": [_step_to_dict(s) for s in track.steps],
    }


def pattern_to_dict(pattern: Pattern) -> dict:
    per_track = pattern.per_track_settings
    return {
        "id": pattern.id,
        "name": pattern.name,
        "length": pattern.length,
        "part_assignment": pattern.part_assignment,
        "scale_mode": pattern.scale_mode,
        "master_scale": pattern.master_scale,
        "chain_mode": pattern.chain_mode,
        "tempo_info": pattern.tempo_info,
        "active_tracks": pattern.active_tracks,
        "trig_counts": _counts_to_dict(pattern.trig_counts),
        "per_track_settings": asdict(per_track) if per_track else None,
        "has_swing": pattern.has_swing,
        "tracks": [_track_to_dict(t) for t in pattern.tracks],
    }


def bank_to_dict(bank: Bank) -> dict:
    """Convert a Bank to a serializable dict; every part lists its patterns."""
    patterns: dict[int, dict] = {}
    parts = []
    for part in bank.parts:
        part_patterns = []
        for pattern in part.patterns:
            if pattern.id not in patterns:
                patterns[pattern.id] = pattern_to_dict(pattern)
            part_patterns.append(patterns[pattern.id])
        parts.append({"id": part.id, "name": part.name, "patterns": part_patterns})
    return {"id": bank.id, "name": bank.name, "index": bank.index, "parts": parts}


def parts_data_to_dict(parts_data: PartsData) -> dict:
    """Convert decoded part parameters to a serializable dict."""
    return asdict(parts_data)


# ── Files ────────────────────────────────────────────────────────────────


def export_scan_json(result: ScanResult, output_path: Path):
    """Export a scan result to a JSON file."""
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(scan_result_to_dict(result), f, indent=2, ensure_ascii=False)


def export_project_json(metadata: ProjectMetadata, banks: list[Bank], output_path: Path):
    """Export a project's metadata and banks to a single JSON file."""
    data = {
        "export_version": "1.0",
        "metadata": metadata_to_dict(metadata),
        "banks": [bank_to_dict(b) for b in banks],
    }
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
