#!/usr/bin/env python3
"""
Integration tests for the store CLI (samla-db).
"""
import pytest
from click.testing import CliRunner

from samla.database.cli import cli
from samla.database.migrations import MIGRATIONS


class TestDatabaseCLI:
    """Test store CLI commands against a temporary home."""

    @pytest.fixture
    def runner(self):
        """Create Click test runner."""
        return CliRunner()

    def invoke_cli(self, runner, home, args):
        """Helper to invoke the CLI with a temporary home."""
        return runner.invoke(cli, ["--home", str(home)] + args)

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "store" in result.output.lower()

    def test_init_creates_folders_and_migrates(self, runner, tmp_path):
        result = self.invoke_cli(runner, tmp_path, ["init"])

        assert result.exit_code == 0, result.output
        assert "Applied migrations: 1, 2, 3" in result.output
        assert f"Store ready at version {MIGRATIONS[-1].version}" in result.output
        assert (tmp_path / "Data" / "samla.db").exists()
        assert (tmp_path / "Images").is_dir()

    def test_init_twice_is_a_no_op(self, runner, tmp_path):
        self.invoke_cli(runner, tmp_path, ["init"])
        result = self.invoke_cli(runner, tmp_path, ["init"])

        assert result.exit_code == 0
        assert "already up to date" in result.output

    def test_migration_status_before_and_after(self, runner, tmp_path):
        result = self.invoke_cli(runner, tmp_path, ["migration", "status"])
        assert "Current version: 0" in result.output
        assert "Pending migrations:" in result.output

        self.invoke_cli(runner, tmp_path, ["init"])
        result = self.invoke_cli(runner, tmp_path, ["migration", "status"])
        assert "Store is up to date" in result.output

    def test_migration_history(self, runner, tmp_path):
        result = self.invoke_cli(runner, tmp_path, ["migration", "history"])
        assert "No migrations applied" in result.output

        self.invoke_cli(runner, tmp_path, ["init"])
        result = self.invoke_cli(runner, tmp_path, ["migration", "history"])
        assert MIGRATIONS[0].description in result.output

    def test_stats(self, runner, tmp_path):
        result = self.invoke_cli(runner, tmp_path, ["stats"])

        assert result.exit_code == 0
        assert "Sets: 0" in result.output
        assert "Images: 0" in result.output

    def test_stats_counts_images_under_home(self, runner, tmp_path):
        images = tmp_path / "Images"
        images.mkdir()
        (images / "a.png").write_bytes(b"x")

        result = self.invoke_cli(runner, tmp_path, ["stats"])

        assert result.exit_code == 0
        assert "Images: 1" in result.output

    def test_invalid_config_exits_with_error(self, runner, tmp_path):
        (tmp_path / "config.yaml").write_text("download_timeout: never\n", encoding="utf-8")

        result = runner.invoke(
            cli,
            ["--home", str(tmp_path), "--log-dir", str(tmp_path / "logs"), "stats"],
        )

        assert result.exit_code == 1
        assert "ValidationError" in result.output
