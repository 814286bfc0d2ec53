"""Tests for JSON export and the command-line bridge."""

import json
from pathlib import Path

from octatools.cli_export import main
from octatools.core.models import (
    DeviceType,
    OctatrackLocation,
    OctatrackProject,
    OctatrackSet,
    ScanResult,
)
from octatools.core.ot_parser import BankParser
from octatools.core.project_reader import build_bank, read_project_banks, read_project_metadata
from octatools.discovery import classifier
from octatools.export.json_export import (
    bank_to_dict,
    export_project_json,
    export_scan_json,
    metadata_to_dict,
    scan_result_to_dict,
)


def _scan_result() -> ScanResult:
    project = OctatrackProject(name="P1", path=Path("/card/LIVE/P1"), has_project_file=True)
    octa_set = OctatrackSet(
        name="LIVE", path=Path("/card/LIVE"), has_audio_pool=True, projects=(project,)
    )
    location = OctatrackLocation(
        name="card", path=Path("/card"), device_type=DeviceType.COMPACT_FLASH, sets=(octa_set,)
    )
    lone = OctatrackProject(name="LONE", path=Path("/home/me/LONE"))
    return ScanResult(locations=(location,), standalone_projects=(lone,))


def test_scan_result_to_dict():
    data = scan_result_to_dict(_scan_result())
    location = data["locations"][0]
    assert location["device_type"] == "compact_flash"
    assert location["path"] == str(Path("/card"))
    assert location["sets"][0]["has_audio_pool"]
    assert location["sets"][0]["projects"][0]["name"] == "P1"
    assert data["standalone_projects"][0]["has_banks"] is False


def test_export_scan_json(tmp_path):
    output = tmp_path / "scan.json"
    export_scan_json(_scan_result(), output)
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["locations"][0]["name"] == "card"


def test_bank_to_dict(tmp_path, bank_builder):
    bank_builder.set_audio_mask(0, 0, "trigger", bytes(7) + b"\x01")
    bank_builder.write(tmp_path / "bank01.work")
    bank = read_project_banks(tmp_path)[0]

    data = bank_to_dict(bank)

    assert data["id"] == "A"
    assert data["name"] == "Bank A"
    assert len(data["parts"]) == 4
    pattern = data["parts"][2]["patterns"][0]
    assert pattern["name"] == "Pattern 1"
    assert pattern["tempo_info"] is None
    assert pattern["trig_counts"]["total"] == 1
    assert pattern["tracks"][0]["steps"][0]["trigger"] is True
    assert pattern["tracks"][8]["track_type"] == "MIDI"
    json.dumps(data)


def test_metadata_to_dict_and_export(tmp_path, project_text, bank_builder):
    project = tmp_path / "P1"
    project.mkdir()
    (project / "project.work").write_text(project_text, encoding="latin-1")
    bank_builder.write(project / "bank01.work")

    metadata = read_project_metadata(project)
    data = metadata_to_dict(metadata)
    assert data["tempo"] == 125.0
    assert data["current_state"]["audio_muted_tracks"] == (0, 2)
    assert [s["slot_id"] for s in data["sample_slots"]["static_slots"]] == [2]
    assert data["sample_slots"]["flex_slots"][0]["timestretch_mode"] == "Beat"

    output = tmp_path / "project.json"
    export_project_json(metadata, read_project_banks(project), output)
    exported = json.loads(output.read_text(encoding="utf-8"))
    assert exported["metadata"]["name"] == "P1"
    assert [b["id"] for b in exported["banks"]] == ["A"]


# ── Command line ─────────────────────────────────────────────────────────


def test_cli_scan(tmp_path, monkeypatch, capsys, octa_tree):
    monkeypatch.setattr(classifier, "system_prefixes", lambda platform=None: [])
    octa_tree["set"](tmp_path, "LIVE")

    assert main(["scan", str(tmp_path)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["locations"][0]["sets"][0]["name"] == "LIVE"


def test_cli_scan_missing_directory(tmp_path, capsys):
    assert main(["scan", str(tmp_path / "missing")]) == 1
    assert "error" in json.loads(capsys.readouterr().out)


def test_cli_metadata_error(tmp_path, capsys):
    assert main(["metadata", str(tmp_path)]) == 1
    assert "No project file" in json.loads(capsys.readouterr().out)["error"]


def test_cli_banks(tmp_path, capsys, default_bank_bytes):
    (tmp_path / "bank02.work").write_bytes(default_bank_bytes)

    assert main(["banks", str(tmp_path)]) == 0
    assert [b["id"] for b in json.loads(capsys.readouterr().out)] == ["B"]

    assert main(["banks", str(tmp_path), "1"]) == 0
    assert json.loads(capsys.readouterr().out)["index"] == 1

    assert main(["banks", str(tmp_path), "0"]) == 0
    assert json.loads(capsys.readouterr().out) is None


def test_cli_banks_invalid_index(tmp_path, capsys):
    assert main(["banks", str(tmp_path), "20"]) == 1
    assert "Invalid bank index" in json.loads(capsys.readouterr().out)["error"]


def test_cli_parts(tmp_path, capsys, bank_builder):
    bank_builder.set_part_byte(0, "machine_types", 0, 1)
    bank_builder.set_parts_state(edited_bitmask=1)
    bank_builder.write(tmp_path / "bank01.work")

    assert main(["parts", str(tmp_path), "a"]) == 0
    data = json.loads(capsys.readouterr().out)

    assert data["parts_edited_bitmask"] == 1
    assert data["parts_saved_state"] == [0, 0, 0, 0]
    assert len(data["parts"]) == 4
    machine = data["parts"][0]["machines"][0]
    assert machine["machine_type"] == "Flex"
    assert machine["machine_params"]["rtrg"] == 0
    assert machine["machine_params"]["gain"] is None
    assert len(data["parts"][0]["lfos"][0]["custom_lfo_design"]) == 16
    assert data["parts"][3]["midi_ctrl2s"][7]["cc10_num"] == 0


def test_cli_parts_errors(tmp_path, capsys):
    assert main(["parts", str(tmp_path), "Z"]) == 1
    assert "Invalid bank ID" in json.loads(capsys.readouterr().out)["error"]
    assert main(["parts", str(tmp_path), "B"]) == 1
    assert "Bank file not found" in json.loads(capsys.readouterr().out)["error"]


def test_step_lock_values_in_bank_json(bank_builder):
    bank_builder.set_audio_plock(0, 0, 3, 0, 70)
    bank_builder.set_midi_plock(0, 0, 3, 1, 110)
    record = BankParser(Path("bank01.work")).parse_bytes(bank_builder.to_bytes())
    pattern = bank_to_dict(build_bank(record, 0))["parts"][0]["patterns"][0]

    audio_step = pattern["tracks"][0]["steps"][3]
    assert audio_step["audio_plocks"]["machine"]["param1"] == 70
    assert audio_step["audio_plocks"]["amp"]["vol"] is None
    assert audio_step["midi_plocks"] is None
    midi_step = pattern["tracks"][8]["steps"][3]
    assert midi_step["midi_plocks"]["midi"]["vel"] == 110
    assert pattern["tracks"][0]["steps"][2]["audio_plocks"] is None
