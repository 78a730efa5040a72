"""Tests for the json.dumps fallback serializer."""

import json
from datetime import datetime, timezone
from pathlib import Path

from core.utils.json_serializers import json_serializer
from ishremote.schemas import BaseFolder, FolderLocationResponse


def dumps(value):
    return json.loads(json.dumps(value, default=json_serializer))


def test_datetime_is_iso():
    moment = datetime(2026, 1, 5, 14, 30, tzinfo=timezone.utc)
    assert dumps({"at": moment}) == {"at": "2026-01-05T14:30:00+00:00"}


def test_enum_uses_value():
    assert dumps([BaseFolder.EDITOR_TEMPLATE]) == ["EditorTemplate"]


def test_model_uses_wire_names():
    response = FolderLocationResponse(base_folder="Data", folder_path=["A"])
    assert dumps(response) == {"baseFolder": "Data", "folderPath": ["A"]}


def test_path_and_set():
    assert dumps({"p": Path("/tmp/x"), "s": {"only"}}) == {"p": "/tmp/x", "s": ["only"]}


def test_unknown_falls_back_to_str():
    assert dumps([object]) == [str(object)]
