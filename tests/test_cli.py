"""Tests for the command-line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from localizer.cli import cli


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def tables_dir(tmp_path):
    """Create a directory of JSON tables."""
    (tmp_path / "en.json").write_text(json.dumps({"greet": "Hello", "farewell": "Bye"}), encoding="utf-8")
    (tmp_path / "fr.json").write_text(json.dumps({"greet": "Bonjour"}), encoding="utf-8")
    return tmp_path


class TestMissingCommand:
    """Tests for the missing command."""

    def test_lists_missing_keys(self, runner, tables_dir):
        """Test missing keys are listed per language."""
        result = runner.invoke(cli, ["missing", str(tables_dir), "--source", "en"])

        assert result.exit_code == 0
        assert "French (fr): 1 missing" in result.output
        assert "+ farewell" in result.output

    def test_nothing_missing(self, runner, tmp_path):
        """Test complete tables report nothing."""
        (tmp_path / "en.json").write_text('{"a": "A"}', encoding="utf-8")
        (tmp_path / "de.json").write_text('{"a": "Ah"}', encoding="utf-8")

        result = runner.invoke(cli, ["missing", str(tmp_path), "-s", "en"])

        assert "No missing translations." in result.output


class TestTranslateCommand:
    """Tests for the translate command."""

    def test_dry_run(self, runner, tables_dir):
        """Test dry run needs no API key and writes nothing."""
        result = runner.invoke(cli, ["translate", str(tables_dir), "-s", "en", "--dry-run"])

        assert result.exit_code == 0
        assert "Dry run - no files modified." in result.output
        assert json.loads((tables_dir / "fr.json").read_text(encoding="utf-8")) == {"greet": "Bonjour"}

    def test_missing_api_key(self, runner, tables_dir):
        """Test translation without an API key is a configuration error."""
        result = runner.invoke(cli, ["translate", str(tables_dir)], env={"ALGEBRAS_API_KEY": ""})

        assert result.exit_code == 2
        assert "API key is required" in result.output

    def test_invalid_batch_size(self, runner, tables_dir):
        """Test out-of-range batch settings are rejected."""
        result = runner.invoke(
            cli, ["translate", str(tables_dir), "--api-key", "k", "--batch-size", "500"]
        )

        assert result.exit_code == 2
        assert "Batch size" in result.output

    def test_translates_and_writes(self, runner, tables_dir, echo_client):
        """Test a run merges translations into the files."""
        with patch("localizer.core.service.AlgebrasClient", return_value=echo_client):
            result = runner.invoke(cli, [
                "translate", str(tables_dir), "-s", "en", "-l", "fr,de",
                "--only-missing", "--delay", "0", "--api-key", "k",
            ])

        assert result.exit_code == 0, result.output
        assert "Translation completed" in result.output
        assert json.loads((tables_dir / "fr.json").read_text(encoding="utf-8")) == {
            "greet": "Bonjour", "farewell": "Bye_fr",
        }
        assert json.loads((tables_dir / "de.json").read_text(encoding="utf-8")) == {
            "greet": "Hello_de", "farewell": "Bye_de",
        }

    def test_glossary_warning(self, runner, tables_dir, echo_client):
        """Test a glossary in batch mode is flagged to the user."""
        with patch("localizer.core.service.AlgebrasClient", return_value=echo_client):
            result = runner.invoke(cli, [
                "translate", str(tables_dir), "-s", "en", "--glossary", "g-1",
                "--delay", "0", "--api-key", "k",
            ])

        assert "Warning: Glossary 'g-1' is ignored in batch mode" in result.output

    def test_failures_listed(self, runner, tables_dir, echo_client):
        """Test failed batches are shown."""
        echo_client.fail_languages = {"fr"}
        with patch("localizer.core.service.AlgebrasClient", return_value=echo_client):
            result = runner.invoke(cli, [
                "translate", str(tables_dir), "-s", "en", "--delay", "0", "--api-key", "k",
            ])

        assert result.exit_code == 0
        assert "Failed translations:" in result.output
        assert "HTTP 500 for fr" in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def test_without_api_key(self, runner):
        """Test check fails fast without an API key."""
        result = runner.invoke(cli, ["check"], env={"ALGEBRAS_API_KEY": ""})

        assert result.exit_code == 1
        assert "ALGEBRAS_API_KEY" in result.output

    def test_ready(self, runner, echo_client):
        """Test a reachable provider is reported ready."""
        with patch("localizer.core.service.AlgebrasClient", return_value=echo_client):
            result = runner.invoke(cli, ["check", "--api-key", "k"])

        assert result.exit_code == 0
        assert "ready" in result.output
