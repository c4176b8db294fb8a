import feature_flags
from feature_flags import (
    get_carver_feature,
    is_uniqueness_check_enabled,
    reload as reload_features,
)


def setup_function():
    reload_features()


def teardown_function():
    reload_features()


def test_uniqueness_check_disabled_by_default():
    assert is_uniqueness_check_enabled({}) is False
    assert is_uniqueness_check_enabled({}, difficulty="hard") is False


def test_uniqueness_check_can_be_overridden_via_env():
    assert is_uniqueness_check_enabled({"CLI_SUDOKU_ENSURE_UNIQUE": "1"}) is True
    assert is_uniqueness_check_enabled({"SUDOKU_ENSURE_UNIQUE": "yes"}) is True
    assert is_uniqueness_check_enabled({"SUDOKU_ENSURE_UNIQUE": "off"}) is False


def test_cli_override_wins_over_generic_one():
    env = {"CLI_SUDOKU_ENSURE_UNIQUE": "false", "SUDOKU_ENSURE_UNIQUE": "true"}
    assert is_uniqueness_check_enabled(env) is False


def test_unparseable_override_is_ignored():
    assert is_uniqueness_check_enabled({"SUDOKU_ENSURE_UNIQUE": "maybe"}) is False


def test_carver_feature_merges_profile_overrides(tmp_path, monkeypatch):
    features = tmp_path / "features.toml"
    features.write_text(
        "[carver]\n"
        "ensure_unique = false\n"
        "\n"
        "[carver.by_profile.hard]\n"
        "ensure_unique = true\n",
        "utf-8",
    )
    monkeypatch.setattr(feature_flags, "_features_path", lambda: features)
    reload_features()

    assert get_carver_feature("easy") == {"ensure_unique": False}
    assert get_carver_feature("HARD") == {"ensure_unique": True}
    assert is_uniqueness_check_enabled({}, difficulty="hard") is True
    assert is_uniqueness_check_enabled({"SUDOKU_ENSURE_UNIQUE": "0"}, difficulty="hard") is False


def test_missing_features_file_means_defaults(tmp_path, monkeypatch):
    monkeypatch.setattr(feature_flags, "_features_path", lambda: tmp_path / "absent.toml")
    reload_features()
    assert get_carver_feature("easy") == {}
    assert is_uniqueness_check_enabled({}) is False
