"""Tests for the command line interface."""

from pathlib import Path

from typer.testing import CliRunner

from tier_rating.cli import app
from tier_rating.core.config import DATABASE_URL_ENV

CONFIGS_DIR = Path(__file__).resolve().parent.parent / "configs"

runner = CliRunner()


class TestCli:
    """Tests for CLI commands."""

    def test_version(self):
        """Test --version prints the version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "tier-rating v" in result.stdout

    def test_classify(self):
        """Test classifying a score with the default thresholds."""
        result = runner.invoke(app, ["classify", "6.7"])
        assert result.exit_code == 0
        assert result.stdout.strip() == "S"

    def test_levels(self):
        """Test listing levels."""
        result = runner.invoke(app, ["levels"])
        assert result.exit_code == 0
        assert "renshang" in result.stdout

    def test_rate_then_stats(self, tmp_path):
        """Test a rating persists across invocations."""
        db = f"sqlite:///{tmp_path / 'cli.db'}"
        result = runner.invoke(app, ["rate", "movie", "alice", "ding", "--db", db])
        assert result.exit_code == 0, result.stdout
        runner.invoke(app, ["rate", "movie", "bob", "jia", "-d", "technical=la", "--db", db])

        result = runner.invoke(app, ["stats", "movie", "--db", db])
        assert result.exit_code == 0
        assert "Ratings: 2" in result.stdout
        assert "Mean score: 6.00" in result.stdout

    def test_rate_unknown_level_fails(self, tmp_path):
        """Test validation errors exit with code 1."""
        db = f"sqlite:///{tmp_path / 'cli.db'}"
        result = runner.invoke(app, ["rate", "movie", "alice", "legendary", "--db", db])
        assert result.exit_code == 1
        assert "Unknown level key" in result.stdout

    def test_validate_shipped_config(self):
        """Test validating an example config."""
        result = runner.invoke(app, ["validate", str(CONFIGS_DIR / "five_levels.yaml")])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.stdout

    def test_validate_missing_config(self):
        """Test validating a missing file fails."""
        result = runner.invoke(app, ["validate", "/nonexistent/config.yaml"])
        assert result.exit_code == 1

    def test_validate_does_not_touch_database(self, tmp_path, monkeypatch):
        """Test validate leaves a configured database file uncreated."""
        db_file = tmp_path / "untouched.db"
        monkeypatch.setenv(DATABASE_URL_ENV, f"sqlite:///{db_file}")
        result = runner.invoke(app, ["validate", str(CONFIGS_DIR / "seven_levels.yaml")])
        assert result.exit_code == 0
        assert not db_file.exists()

    def test_levels_missing_config(self):
        """Test a missing --config file exits cleanly."""
        result = runner.invoke(app, ["levels", "--config", "/nonexistent/config.yaml"])
        assert result.exit_code == 1
        assert "Error" in result.stdout
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_classify_invalid_config(self, tmp_path):
        """Test an invalid config exits cleanly."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("classifier:\n  thresholds: []\n")
        result = runner.invoke(app, ["classify", "5", "--config", str(config_file)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout
