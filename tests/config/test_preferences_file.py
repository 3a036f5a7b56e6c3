from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from harmonipy.config import InvalidPreferencesError, load_preferences, parse_preferences


def test_per_property_preferences_from_toml(tmp_path: Path) -> None:
    path = tmp_path / "preferences.toml"
    path.write_text(
        '[properties]\nmedia = ["Alpha"]\nduration = ["Beta", "Alpha"]\n',
        encoding="utf-8",
    )

    preferences = load_preferences(path)

    assert not preferences.same_provider
    assert preferences.general == ("Alpha",)
    assert preferences.by_property["duration"] == ("Beta", "Alpha")


def test_provider_list_from_json() -> None:
    preferences = parse_preferences('{"providers": ["Beta"]}', format="json")

    assert preferences.same_provider
    assert preferences.general == ("Beta",)


@pytest.mark.parametrize(
    ("text", "reason"),
    [
        ("{}", "either 'providers' or 'properties'"),
        ('{"providers": ["A"], "properties": {}}', "either 'providers' or 'properties'"),
        ('{"properties": {"colour": ["A"]}}', "unknown properties: colour"),
        ('{"provider": ["A"]}', "provider"),
        ("{", "not valid JSON"),
    ],
)
def test_invalid_documents(text: str, reason: str) -> None:
    with pytest.raises(InvalidPreferencesError, match=reason):
        parse_preferences(text, format="json", source="prefs.json")


def test_unsupported_or_missing_files(tmp_path: Path) -> None:
    yaml_file = tmp_path / "preferences.yaml"
    yaml_file.write_text("providers: []", encoding="utf-8")

    with pytest.raises(InvalidPreferencesError, match="unsupported format 'yaml'"):
        load_preferences(yaml_file)
    with pytest.raises(InvalidPreferencesError, match="missing.toml"):
        load_preferences(tmp_path / "missing.toml")
