"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from bdscore import __version__
from bdscore.cli import cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("BDSCORE_WEIGHTINGS_FILE", raising=False)
    return CliRunner()


@pytest.fixture
def opportunities_file(tmp_path):
    path = tmp_path / "opps.json"
    path.write_text(json.dumps([
        {"title": "JADC2 integration", "agency": "USAF", "score": 70, "tags": ["JADC2"]},
        {"title": "Grounds mowing", "agency": "USACE", "score": 50, "tags": ["commodity"]},
        {"title": "Readiness dashboard", "agency": "Army", "score": 62, "tags": []},
    ]))
    return path


class TestScoreCommand:
    """Test the score command."""

    def test_text_output(self, runner):
        result = runner.invoke(cli, ["score", "70", "-t", "training modernization", "-t", "commodity", "-q"])
        assert result.exit_code == 0
        assert result.output.strip() == "67 SHAPE"

    def test_json_output(self, runner):
        result = runner.invoke(cli, ["score", "50", "-t", "uniforms", "-t", "janitorial", "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["adjusted_score"] == 5
        assert data["bucket"] == "AVOID"

    def test_text_signals(self, runner):
        result = runner.invoke(cli, ["score", "85", "-t", "JADC2", "--text", "JADC2 battle management",
                                     "-f", "json"])
        data = json.loads(result.output)
        assert data["primary_domain_fit"] is True
        assert data["commodity"] is False

    def test_negative_score(self, runner):
        result = runner.invoke(cli, ["score", "-q", "-t", "AI", "--", "-20"])
        assert result.exit_code == 0
        assert result.output.strip() == "0 AVOID"

    def test_nan_rejected(self, runner):
        result = runner.invoke(cli, ["score", "nan", "-t", "AI", "-q"])
        assert result.exit_code == 1

    def test_breakdown_shown(self, runner):
        result = runner.invoke(cli, ["score", "70", "-t", "commodity"])
        assert result.exit_code == 0
        assert "Tag Weighting" in result.output

    def test_config_table(self, runner, tmp_path):
        config = tmp_path / "bdscore.yaml"
        config.write_text("tag_weightings:\n  priority: 2.0\n")
        result = runner.invoke(cli, ["score", "40", "-t", "priority", "--config", str(config), "-q"])
        assert result.output.strip() == "80 CHASE"

    def test_bad_config(self, runner, tmp_path):
        config = tmp_path / "bdscore.yaml"
        config.write_text("tag_weightings:\n  priority: lots\n")
        result = runner.invoke(cli, ["score", "40", "--config", str(config), "-q"])
        assert result.exit_code == 1


class TestScoreResponseCommand:
    """Test scoring a saved classifier response."""

    def test_from_file(self, runner, tmp_path):
        path = tmp_path / "response.json"
        path.write_text('```json\n{"score": 70, "tags": ["training modernization", "commodity"]}\n```')
        result = runner.invoke(cli, ["score-response", str(path), "-f", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["adjusted_score"] == 67

    def test_from_stdin(self, runner):
        result = runner.invoke(cli, ["score-response", "-", "-q"], input='{"score": 90, "tags": ["C2"]}')
        assert result.exit_code == 0
        assert result.output.strip() == "100 CHASE"

    def test_invalid_response(self, runner):
        result = runner.invoke(cli, ["score-response", "-", "-q"], input="no json here")
        assert result.exit_code == 1


class TestBucketCommand:
    """Test the bucket command."""

    @pytest.mark.parametrize("score,expected", [("80", "CHASE"), ("79.9", "SHAPE"), ("40", "MONITOR"), ("0", "AVOID")])
    def test_bucket(self, runner, score, expected):
        result = runner.invoke(cli, ["bucket", score])
        assert result.exit_code == 0
        assert result.output.strip() == expected

    def test_nan_rejected(self, runner):
        """NaN has no bucket."""
        result = runner.invoke(cli, ["bucket", "nan"])
        assert result.exit_code == 1
        assert "AVOID" not in result.output


class TestCheckTextCommand:
    """Test the check-text command."""

    def test_commodity_exit_code(self, runner):
        result = runner.invoke(cli, ["check-text", "we need new office furniture"])
        assert result.exit_code == 1
        assert "commodity: yes (furniture)" in result.output

    def test_clean_text(self, runner):
        result = runner.invoke(cli, ["check-text", "database table schema", "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["commodity"] is False
        assert data["commodity_keywords"] == []


class TestBatchCommand:
    """Test batch scoring."""

    def test_csv_to_stdout(self, runner, opportunities_file):
        result = runner.invoke(cli, ["batch", str(opportunities_file), "-q"])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0].startswith("title,agency")
        assert lines[1].startswith("JADC2 integration")
        assert len(lines) == 4

    def test_json_with_bucket_filter(self, runner, opportunities_file):
        result = runner.invoke(cli, ["batch", str(opportunities_file), "-f", "json", "--bucket", "shape", "-q"])
        data = json.loads(result.output)
        assert [o["title"] for o in data["opportunities"]] == ["Readiness dashboard"]

    def test_output_file(self, runner, opportunities_file, tmp_path):
        output = tmp_path / "scored.json"
        result = runner.invoke(cli, ["batch", str(opportunities_file), "-o", str(output), "-f", "json", "-q"])
        assert result.exit_code == 0
        assert json.loads(output.read_text())["total_opportunities"] == 3

    def test_bad_input(self, runner, tmp_path):
        path = tmp_path / "opps.json"
        path.write_text("{broken")
        result = runner.invoke(cli, ["batch", str(path), "-q"])
        assert result.exit_code == 1

    def test_undecodable_input(self, runner, tmp_path):
        """Non-UTF-8 files exit 1 with a load error instead of a traceback."""
        path = tmp_path / "opps.csv"
        path.write_bytes(b"title,score\n\xff\xfe bad,50\n")
        result = runner.invoke(cli, ["batch", str(path), "-q"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)


class TestBriefCommand:
    """Test the daily brief."""

    def test_brief(self, runner, opportunities_file):
        result = runner.invoke(cli, ["brief", str(opportunities_file)])
        assert result.exit_code == 0
        assert "## CHASE - Active Pursuit (1)" in result.output
        assert "JADC2 integration (USAF) - Score: 100" in result.output
        assert "## SHAPE - Position Early (1)" in result.output
        assert "Grounds mowing" not in result.output


class TestConfigCommands:
    """Test weightings, check and version."""

    def test_weightings_json(self, runner):
        result = runner.invoke(cli, ["weightings", "-f", "json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["JADC2"] == 1.5

    def test_weightings_table(self, runner):
        result = runner.invoke(cli, ["weightings"])
        assert result.exit_code == 0
        assert "training modernization" in result.output

    def test_check_lists_ignored(self, runner, tmp_path):
        config = tmp_path / "bdscore.yaml"
        config.write_text("tag_weightings:\n  disabled: 0\n  AI: 1.5\n")
        result = runner.invoke(cli, ["check", "--config", str(config)])
        assert result.exit_code == 0
        assert "Tag weightings: 2 tags" in result.output
        assert "Ignored (multiplier <= 0): disabled" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["version"])
        assert result.output.strip() == "bdscore 1.2.0"

    def test_version_option_matches_package(self, runner):
        """--version reports the package version."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
