"""Shared test fixtures and helpers for subagent-skills tests."""

import json
import os
from pathlib import Path
from typing import Callable

from subagent_skills.config import Config


def make_config(tmp_path: Path, **overrides) -> Config:
	"""Config whose user agent directory lives under tmp_path."""
	values = {
		"config_dir": tmp_path / "config",
		"data_dir": tmp_path / "data",
		"agent_dir": tmp_path / "home" / ".pi" / "agent",
	}
	values.update(overrides)
	return Config(**values)


def write_skill(
	directory: Path,
	name: str,
	body: str = "",
	description: str | None = None,
	frontmatter_name: str | None = None,
) -> Path:
	"""Create <directory>/<name>/SKILL.md and return its path."""
	skill_dir = directory / name
	skill_dir.mkdir(parents=True, exist_ok=True)
	lines = ["---"]
	if frontmatter_name:
		lines.append(f"name: {frontmatter_name}")
	lines.append(f"description: {description or f'The {name} skill'}")
	lines.append("---")
	lines.append(body or f"Instructions for {name}.")
	skill_file = skill_dir / "SKILL.md"
	skill_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
	return skill_file


def write_json(path: Path, data: object) -> Path:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(json.dumps(data), encoding="utf-8")
	return path


def touch_later(path: Path, seconds: int = 10) -> None:
	"""Push a file's mtime forward so a rewrite is always observable."""
	stat = path.stat()
	os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + seconds * 1_000_000_000))


def rewrite(path: Path, text: str) -> None:
	"""Replace a file's content and guarantee its mtime changes."""
	path.write_text(text, encoding="utf-8")
	touch_later(path)


class FakeClock:
	"""Millisecond clock advanced by hand."""

	def __init__(self, start: float = 1_000_000.0):
		self.now = start

	def __call__(self) -> float:
		return self.now

	def advance(self, ms: float) -> None:
		self.now += ms


def capture_tools(config, register_fn: Callable) -> dict:
	"""Register tools on a mock MCP and return the captured tool functions.

	Args:
		config: Config object to pass to the registration function
		register_fn: The registration function (e.g., register_skills_tools)

	Returns:
		Dict mapping tool name to the tool function
	"""
	captured = {}

	class MockMCP:
		def tool(self):
			def decorator(fn):
				captured[fn.__name__] = fn
				return fn
			return decorator

	register_fn(MockMCP(), config)
	return captured
