import pytest
from structlog.testing import capture_logs

from version_tracker.config import (
    TrackerSettings,
    load_tracker_config,
    project_version_of,
    validate_tracker_config,
)
from version_tracker.utils.result import ConfigMalformed


def test_version_commands_parsed_in_order():
    result = validate_tracker_config([
        {"name": "python", "versionCommands": [["python3", "--version"], ["python", "--version"]]},
        {"name": "git", "versionCommands": [["git", "--version"]]},
    ])

    config = result.unwrap()
    assert config.names() == ["python", "git"]
    assert config.trackables[0].commands == (("python3", "--version"), ("python", "--version"))


def test_legacy_version_command_string_is_split():
    config = load_tracker_config([{"name": "node", "versionCommand": "node -v"}])

    assert config.trackables[0].commands == (("node", "-v"),)


def test_legacy_command_follows_version_commands():
    config = load_tracker_config([{
        "name": "npm",
        "versionCommands": [["npm", "-v"]],
        "versionCommand": "npm --version",
    }])

    assert config.trackables[0].commands == (("npm", "-v"), ("npm", "--version"))


def test_missing_track_list_is_empty_config():
    assert validate_tracker_config(None).unwrap().trackables == ()


@pytest.mark.parametrize(
    "raw, field",
    [
        ({"track": []}, "track"),
        (["git"], "track[0]"),
        ([{"versionCommands": [["git", "--version"]]}], "track[0].name"),
        ([{"name": "", "versionCommands": [["git", "--version"]]}], "track[0].name"),
        ([{"name": "git"}], "track[0].versionCommands"),
        ([{"name": "git", "versionCommands": []}], "track[0].versionCommands"),
        ([{"name": "git", "versionCommands": "git --version"}], "track[0].versionCommands"),
        ([{"name": "git", "versionCommands": [[]]}], "track[0].versionCommands[0]"),
        ([{"name": "git", "versionCommands": [["git", 2]]}], "track[0].versionCommands[0]"),
        ([{"name": "git", "versionCommand": ""}], "track[0].versionCommand"),
        ([{"name": "git", "versionCommand": ["git"]}], "track[0].versionCommand"),
        ([{"name": "git", "versionCommand": "git 'unterminated"}], "track[0].versionCommand"),
    ],
)
def test_malformed_config_reports_field(raw, field):
    result = validate_tracker_config(raw)

    assert result.is_err()
    assert result.unwrap_err().field == field


def test_duplicate_names_rejected():
    result = validate_tracker_config([
        {"name": "git", "versionCommands": [["git", "--version"]]},
        {"name": "git", "versionCommand": "git version"},
    ])

    assert result.unwrap_err().field == "track[1].name"


def test_load_tracker_config_raises_on_malformed():
    with pytest.raises(ConfigMalformed) as excinfo:
        load_tracker_config([{"name": "git"}])

    assert excinfo.value.error.field == "track[0].versionCommands"


def test_settings_defaults():
    settings = TrackerSettings.from_dict(None).unwrap()

    assert settings.probe_timeout == 10.0
    assert settings.indent == 2
    assert settings.logging.level == "info"
    assert settings.logging.format == "text"


def test_settings_from_dict():
    settings = TrackerSettings.from_dict({
        "probeTimeout": 3,
        "indent": 4,
        "logging": {"level": "debug", "format": "json"},
    }).unwrap()

    assert settings.probe_timeout == 3.0
    assert settings.indent == 4
    assert settings.to_dict()["logging"] == {"level": "debug", "format": "json"}


def test_settings_null_timeout_disables_it():
    assert TrackerSettings.from_dict({"probeTimeout": None}).unwrap().probe_timeout is None


@pytest.mark.parametrize(
    "data, field",
    [
        ([], "settings"),
        ({"probeTimeout": 0}, "settings.probeTimeout"),
        ({"probeTimeout": "soon"}, "settings"),
        ({"indent": 12}, "settings.indent"),
        ({"logging": "loud"}, "settings.logging"),
        ({"logging": {"level": "chatty"}}, "settings.logging.level"),
        ({"logging": {"format": "xml"}}, "settings.logging.format"),
    ],
)
def test_invalid_settings(data, field):
    result = TrackerSettings.from_dict(data)

    assert result.is_err()
    assert result.unwrap_err().field == field


@pytest.mark.parametrize(
    "document, expected",
    [
        ({"version": "1.2.3"}, "1.2.3"),
        ({}, "0.0.0"),
        ({"version": 3}, "0.0.0"),
        ({"version": ""}, "0.0.0"),
    ],
)
def test_project_version_defaults(document, expected):
    assert project_version_of(document) == expected


def test_non_string_project_version_warns():
    with capture_logs() as logs:
        assert project_version_of({"version": 1.2}) == "0.0.0"
        assert project_version_of({}) == "0.0.0"

    warnings = [log for log in logs if log["event"] == "project_version_invalid"]
    assert len(warnings) == 1
    assert warnings[0]["log_level"] == "warning"
    assert warnings[0]["type"] == "float"
    assert warnings[0]["value"] == "1.2"
