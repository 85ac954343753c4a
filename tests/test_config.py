"""Tests for configuration loading."""

import json

import pytest

from bdscore.config import (
    DEFAULT_TAG_WEIGHTINGS,
    ConfigError,
    Settings,
    load_config,
    load_weightings,
    validate_weightings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's environment out of these tests."""
    monkeypatch.delenv("BDSCORE_WEIGHTINGS_FILE", raising=False)


class TestSettings:
    """Test default settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.tag_weightings == DEFAULT_TAG_WEIGHTINGS
        assert settings.weightings_file == ""
        assert settings.brief_limits == {"CHASE": 10, "SHAPE": 5, "MONITOR": 5}

    def test_defaults_are_copies(self):
        """Editing one Settings never leaks into the module defaults."""
        settings = Settings()
        settings.tag_weightings["AI"] = 0.1
        assert DEFAULT_TAG_WEIGHTINGS["AI"] == 1.5

    def test_get_weighting(self):
        weighting = Settings(tag_weightings={"JADC2": 1.5}).get_weighting()
        assert weighting.multiplier_for("jadc2") == 1.5


class TestLoadConfig:
    """Test YAML config loading."""

    def test_no_path(self):
        settings = load_config()
        assert settings.tag_weightings == DEFAULT_TAG_WEIGHTINGS

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_config(str(tmp_path / "missing.yaml"))
        assert settings.tag_weightings == DEFAULT_TAG_WEIGHTINGS

    def test_yaml_replaces_table_wholesale(self, tmp_path):
        """A table in the config file replaces the defaults, it is not merged."""
        path = tmp_path / "bdscore.yaml"
        path.write_text("tag_weightings:\n  training: 1.4\n  janitorial: 0.2\n")

        settings = load_config(str(path))
        assert settings.tag_weightings == {"training": 1.4, "janitorial": 0.2}

    def test_yaml_keyword_lists(self, tmp_path):
        path = tmp_path / "bdscore.yaml"
        path.write_text("commodity_keywords:\n  - catering\nbrief_limits:\n  CHASE: 3\n")

        settings = load_config(str(path))
        assert settings.commodity_keywords == ["catering"]
        assert settings.brief_limits == {"CHASE": 3}

    def test_unknown_key_ignored(self, tmp_path):
        path = tmp_path / "bdscore.yaml"
        path.write_text("colour: blue\n")
        settings = load_config(str(path))
        assert not hasattr(settings, "colour")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "bdscore.yaml"
        path.write_text("")
        assert load_config(str(path)).tag_weightings == DEFAULT_TAG_WEIGHTINGS

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bdscore.yaml"
        path.write_text("tag_weightings: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "bdscore.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError):
            load_config(str(path))

    def test_env_weightings_file_wins(self, tmp_path, monkeypatch):
        """BDSCORE_WEIGHTINGS_FILE overrides the table in the config file."""
        config_path = tmp_path / "bdscore.yaml"
        config_path.write_text("tag_weightings:\n  training: 1.4\n")
        weights_path = tmp_path / "weights.json"
        weights_path.write_text(json.dumps({"C2": 1.8}))
        monkeypatch.setenv("BDSCORE_WEIGHTINGS_FILE", str(weights_path))

        settings = load_config(str(config_path))
        assert settings.weightings_file == str(weights_path)
        assert settings.tag_weightings == {"C2": 1.8}


class TestLoadWeightings:
    """Test per-user weighting files."""

    def test_bare_mapping_json(self, tmp_path):
        path = tmp_path / "weights.json"
        path.write_text(json.dumps({"AI": 1.2, "commodity": 0.4}))
        assert load_weightings(str(path)) == {"AI": 1.2, "commodity": 0.4}

    def test_stored_row_shape(self, tmp_path):
        """Rows exported from the settings store nest the table."""
        path = tmp_path / "weights.json"
        path.write_text(json.dumps({"user_id": "abc", "tag_weightings": {"AI": 1.1}}))
        assert load_weightings(str(path)) == {"AI": 1.1}

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "weights.yml"
        path.write_text("AI: 2\n")
        assert load_weightings(str(path)) == {"AI": 2.0}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_weightings(str(tmp_path / "nope.json"))

    def test_bad_json(self, tmp_path):
        path = tmp_path / "weights.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            load_weightings(str(path))


class TestValidateWeightings:
    """Test multiplier validation."""

    def test_coerces_to_float(self):
        assert validate_weightings({"AI": 2, "C2": "1.5"}) == {"AI": 2.0, "C2": 1.5}

    def test_non_positive_allowed(self):
        """Zero and negative values load; scoring ignores them."""
        assert validate_weightings({"off": 0, "neg": -1}) == {"off": 0.0, "neg": -1.0}

    @pytest.mark.parametrize("value", ["high", None, True, float("nan"), float("inf")])
    def test_rejects_bad_values(self, value):
        with pytest.raises(ConfigError):
            validate_weightings({"AI": value})

    def test_rejects_non_mapping(self):
        with pytest.raises(ConfigError):
            validate_weightings(["AI"])
