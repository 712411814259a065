"""
Tests for CLI commands — global options, run, detect, dotfiles.
"""

import json
import os
import textwrap
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from devstrap.core.services.generators import generate_vimrc, generate_zshrc
from devstrap.main import _prompt, cli


@pytest.fixture
def env(tmp_path: Path, monkeypatch) -> dict[str, str]:
    """A non-root user with an empty home directory."""
    monkeypatch.setattr(os, "geteuid", lambda: 1000)
    home = tmp_path / "home"
    home.mkdir()
    return {"HOME": str(home), "USER": "dev", "SHELL": "/bin/bash", "DEVSTRAP_CONFIG": ""}


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "bootstrap a developer machine" in result.output
        for command in ("run", "detect", "dotfiles"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestRunCommand:
    def test_missing_config(self, tmp_path: Path, env):
        result = CliRunner().invoke(
            cli, ["--config", str(tmp_path / "nope.yml"), "run", "--mock"], env=env,
        )
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_mock_json(self, env):
        result = CliRunner().invoke(cli, ["--quiet", "run", "--mock", "--json"], env=env)
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["report"]["steps"][0] == "directories"

    def test_mock_with_config(self, tmp_path: Path, env):
        config = tmp_path / "devstrap.yml"
        config.write_text(textwrap.dedent("""\
            git:
              name: Ada
              email: ada@example.com
        """))
        result = CliRunner().invoke(
            cli, ["--quiet", "--config", str(config), "run", "--mock", "--json"], env=env,
        )
        assert result.exit_code == 0, result.output

    def test_mock_prints_notes(self, env):
        result = CliRunner().invoke(cli, ["run", "--mock"], env=env)
        assert result.exit_code == 0, result.output
        assert "Required actions:" in result.output
        assert "exec zsh" in result.output

    def test_root_refused(self, env, monkeypatch):
        monkeypatch.setattr(os, "geteuid", lambda: 0)
        result = CliRunner().invoke(cli, ["run", "--mock"], env=env)
        assert result.exit_code == 1
        assert "Do not run as root" in result.output

    def test_ctrl_c_at_prompt_exits_130(self, env, monkeypatch):
        def fake_run_bootstrap(**kwargs):
            kwargs["prompt"]("Enter your name for git")

        def interrupted_prompt(*args, **kwargs):
            # click.prompt turns Ctrl-C into Abort
            raise click.Abort()

        monkeypatch.setattr("devstrap.core.use_cases.bootstrap.run_bootstrap", fake_run_bootstrap)
        monkeypatch.setattr(click, "prompt", interrupted_prompt)
        result = CliRunner().invoke(cli, ["run"], env=env)
        assert result.exit_code == 130
        assert "Setup cancelled by user." in result.output

    def test_keyboard_interrupt_exits_130(self, env, monkeypatch):
        def fake_run_bootstrap(**kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr("devstrap.core.use_cases.bootstrap.run_bootstrap", fake_run_bootstrap)
        result = CliRunner().invoke(cli, ["run"], env=env)
        assert result.exit_code == 130

    def test_prompt_abort_becomes_keyboard_interrupt(self, monkeypatch):
        def interrupted_prompt(*args, **kwargs):
            raise click.Abort()

        monkeypatch.setattr(click, "prompt", interrupted_prompt)
        with pytest.raises(KeyboardInterrupt):
            _prompt("Enter your email for git")


class TestDetectCommand:
    def test_json(self):
        result = CliRunner().invoke(cli, ["detect", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["tag"] in {
            "ubuntu", "macos", "al2023", "amazon", "redhat", "fedora", "centos", "arch", "linux",
        }

    def test_human(self):
        result = CliRunner().invoke(cli, ["detect"])
        assert result.exit_code == 0
        assert "Package manager:" in result.output


class TestDotfilesCommand:
    def test_show_zshrc(self):
        result = CliRunner().invoke(cli, ["dotfiles", "show", "zshrc"])
        assert result.exit_code == 0
        assert result.output == generate_zshrc().content

    def test_show_unknown(self):
        result = CliRunner().invoke(cli, ["dotfiles", "show", "bashrc"])
        assert result.exit_code != 0

    def test_write(self, env):
        result = CliRunner().invoke(cli, ["dotfiles", "write", "vimrc"], env=env)
        assert result.exit_code == 0, result.output
        assert (Path(env["HOME"]) / ".vimrc").read_text() == generate_vimrc().content

    def test_write_dry_run(self, env):
        result = CliRunner().invoke(cli, ["dotfiles", "write", "zshrc", "--dry-run"], env=env)
        assert result.exit_code == 0, result.output
        assert "Would overwrite" in result.output
        assert not (Path(env["HOME"]) / ".zshrc").exists()
