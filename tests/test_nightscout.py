from __future__ import annotations

import json
from pathlib import Path

import pytest

from glucodelta.sources.nightscout import (
    NightscoutPaths,
    NightscoutSource,
    _entry_timestamp,
    _entry_to_reading,
)


def _write(tmp_path: Path, data: object, name: str = "entries.json") -> Path:
    p = tmp_path / name
    p.write_text(json.dumps(data), encoding="utf-8")
    return p


def test_loads_sgv_entries_sorted(tmp_path: Path) -> None:
    data = [
        {"type": "sgv", "sgv": 130, "date": 1_700_000_300_000, "direction": "Flat"},
        {"type": "sgv", "sgv": 120, "date": 1_700_000_000_000, "direction": "Flat"},
        {"type": "mbg", "mbg": 125, "date": 1_700_000_100_000},
        {"type": "cal", "slope": 900, "date": 1_700_000_200_000},
    ]
    p = _write(tmp_path, data)
    readings = NightscoutSource(NightscoutPaths(root=tmp_path)).load_readings(p)
    assert [r.value for r in readings] == [120.0, 130.0]
    assert [r.timestamp for r in readings] == [1_700_000_000_000, 1_700_000_300_000]
    assert readings[0].recalculated == 120.0


def test_rejects_non_list(tmp_path: Path) -> None:
    p = _write(tmp_path, {"sgv": 100})
    with pytest.raises(ValueError, match="must be a list"):
        NightscoutSource(NightscoutPaths(root=tmp_path)).load_readings(p)


def test_entry_without_type_is_sgv() -> None:
    reading = _entry_to_reading({"sgv": 101, "date": 5})
    assert reading is not None
    assert reading.value == 101.0


@pytest.mark.parametrize(
    "item",
    [
        {"sgv": "101", "date": 5},
        {"sgv": True, "date": 5},
        {"sgv": 101},
        {"sgv": 101, "dateString": "no es fecha"},
        "texto",
    ],
)
def test_incomplete_entries_are_skipped(item: object) -> None:
    assert _entry_to_reading(item) is None


def test_date_string_fallback() -> None:
    assert _entry_timestamp({"dateString": "2023-11-14T22:13:20.000Z"}) == 1_700_000_000_000


def test_naive_date_string_is_utc() -> None:
    assert _entry_timestamp({"dateString": "2023-11-14T22:13:20"}) == 1_700_000_000_000


def test_newest_json_uses_entries_pattern(tmp_path: Path) -> None:
    _write(tmp_path, [], name="treatments.json")
    entries = _write(tmp_path, [], name="entries_2023.json")
    assert NightscoutSource(NightscoutPaths(root=tmp_path)).newest_json() == entries


def test_validate_missing_root(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        NightscoutSource(NightscoutPaths(root=tmp_path / "nada")).validate()
