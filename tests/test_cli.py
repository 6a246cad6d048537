"""Tests for the CLI module."""

import argparse
import json
import logging
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console

from subagent_skills.cli import (
	_check_config_toml,
	cmd_doctor,
	cmd_list,
	cmd_paths,
	cmd_resolve,
	main,
)
from subagent_skills.logging_config import LOGGER_NAME
from tests.helpers import make_config, write_json, write_skill


@pytest.fixture(autouse=True)
def isolate_logging():
	"""Keep handlers installed by main() from leaking between tests."""
	logger = logging.getLogger(LOGGER_NAME)
	saved = list(logger.handlers)
	logger.handlers.clear()
	yield
	for handler in logger.handlers:
		handler.close()
	logger.handlers[:] = saved


@pytest.fixture
def project(tmp_path: Path):
	"""A project with one project skill and one user skill, and a patched config."""
	config = make_config(tmp_path)
	cwd = tmp_path / "proj"
	write_skill(cwd / ".pi" / "skills", "review", body="Review it.", description="Code review")
	write_skill(config.agent_dir / "skills", "deploy", body="Ship it.")
	with patch("subagent_skills.cli.load_config", return_value=config):
		yield cwd


def test_list_json(project, capsys):
	cmd_list(argparse.Namespace(cwd=str(project), json=True))
	data = json.loads(capsys.readouterr().out)
	assert [s["name"] for s in data] == ["deploy", "review"]
	assert data[1]["source"] == "project"


def test_list_table(project):
	console = Console(record=True, width=120)
	cmd_list(argparse.Namespace(cwd=str(project), json=False), console=console)
	output = console.export_text()
	assert "review" in output
	assert "Code review" in output
	assert "user" in output


def test_list_empty(tmp_path: Path):
	console = Console(record=True, width=120)
	with patch("subagent_skills.cli.load_config", return_value=make_config(tmp_path)):
		cmd_list(argparse.Namespace(cwd=str(tmp_path), json=False), console=console)
	assert "No skills found" in console.export_text()


def test_resolve_inject(project, capsys):
	cmd_resolve(argparse.Namespace(names="review,deploy", cwd=str(project), inject=True, json=False))
	out = capsys.readouterr().out
	assert out == '<skill name="review">\nReview it.\n</skill>\n\n<skill name="deploy">\nShip it.\n</skill>\n'


def test_resolve_json(project, capsys):
	cmd_resolve(argparse.Namespace(names="review", cwd=str(project), inject=False, json=True))
	data = json.loads(capsys.readouterr().out)
	assert data["missing"] == []
	assert data["resolved"][0]["content"] == "Review it."


def test_resolve_missing_exits(project, capsys):
	with pytest.raises(SystemExit) as exc:
		cmd_resolve(argparse.Namespace(names="review,nope", cwd=str(project), inject=False, json=False))
	assert exc.value.code == 1
	captured = capsys.readouterr()
	assert "review (project)" in captured.out
	assert "Missing skills: nope" in captured.err


def test_paths(project, capsys):
	cmd_paths(argparse.Namespace(cwd=str(project)))
	lines = capsys.readouterr().out.splitlines()
	assert lines[0].startswith("project")
	assert lines[0].endswith(str(project / ".pi" / "skills"))
	assert lines[1].startswith("user")


def test_check_config_toml(tmp_path: Path):
	assert _check_config_toml(tmp_path)[0] == "not found (optional)"
	(tmp_path / "config.toml").write_text("a = 1\n")
	assert _check_config_toml(tmp_path) == ("valid", None)
	(tmp_path / "config.toml").write_text("a = \n")
	status, issue = _check_config_toml(tmp_path)
	assert status.startswith("INVALID")
	assert issue is not None


def test_doctor_reports_broken_settings(project, capsys):
	(project / ".pi" / "settings.json").write_text("{broken")
	with pytest.raises(SystemExit):
		cmd_doctor(argparse.Namespace(cwd=str(project)))
	assert "malformed JSON" in capsys.readouterr().out


def test_doctor_ok(project, capsys):
	write_json(project / ".pi" / "settings.json", {"skills": ["extra"]})
	cmd_doctor(argparse.Namespace(cwd=str(project)))
	out = capsys.readouterr().out
	assert "1 paths" in out
	assert "All checks passed." in out


def test_main_no_command(capsys):
	with patch.object(sys, "argv", ["subagent-skills"]):
		with pytest.raises(SystemExit) as exc:
			main()
	assert exc.value.code == 1


def test_main_dispatches_resolve(project, capsys):
	with patch.object(sys, "argv", ["subagent-skills", "resolve", "review", "--cwd", str(project), "--inject"]):
		main()
	assert '<skill name="review">' in capsys.readouterr().out


def test_main_writes_log_file(project, tmp_path: Path):
	"""main should create the log directory and log to a rotating file there."""
	logger = logging.getLogger(LOGGER_NAME)
	with patch.object(sys, "argv", ["subagent-skills", "-v", "list", "--json", "--cwd", str(project)]):
		main()
	log_file = tmp_path / "data" / "logs" / f"{LOGGER_NAME}.log"
	for handler in logger.handlers:
		handler.flush()
	assert log_file.exists()
	assert "Indexed 2 skills" in log_file.read_text()


def test_main_reports_config_error(capsys):
	with patch.object(sys, "argv", ["subagent-skills", "list"]), \
			patch("subagent_skills.cli.load_config", side_effect=ValueError("SUBAGENT_SKILLS_CACHE_SIZE must be an integer")):
		with pytest.raises(SystemExit) as exc:
			main()
	assert exc.value.code == 2
	assert "Configuration error: SUBAGENT_SKILLS_CACHE_SIZE" in capsys.readouterr().err
