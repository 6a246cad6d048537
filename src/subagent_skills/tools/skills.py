"""Skill resolution tools."""

import json
import os

from mcp.server.fastmcp import FastMCP

from ..config import Config
from ..skills import build_skill_injection, get_skill_resolver, normalize_skill_input


def _names(skills: str | list[str]) -> list[str]:
	return normalize_skill_input(skills) or []


def register_skills_tools(mcp: FastMCP, config: Config) -> None:
	"""Register skills tools."""

	@mcp.tool()
	async def list_skills(cwd: str = "") -> str:
		"""
		List all skills visible from a working directory.

		Skills are discovered from:
		- Project: <cwd>/.pi/skills, project packages and project settings
		- User: ~/.pi/agent/skills, user packages and user settings
		- Configured extension and builtin directories

		Args:
			cwd: Working directory (default: server's current directory)
		"""
		cwd = cwd or os.getcwd()
		skills = get_skill_resolver().discover_available_skills(cwd)

		return json.dumps({
			"skills": [s.to_dict() for s in skills],
			"total": len(skills),
			"cwd": cwd,
		}, indent=2)

	@mcp.tool()
	async def resolve_skills(skills: str, cwd: str = "") -> str:
		"""
		Resolve skill names to their content.

		Args:
			skills: Comma-separated skill names
			cwd: Working directory (default: server's current directory)
		"""
		cwd = cwd or os.getcwd()
		result = get_skill_resolver().resolve_skills(_names(skills), cwd)
		return json.dumps(result.to_dict(), indent=2)

	@mcp.tool()
	async def get_skill_injection(skills: str, cwd: str = "") -> str:
		"""
		Build the text block to inject into a subagent's task for the given skills.

		Args:
			skills: Comma-separated skill names
			cwd: Working directory (default: server's current directory)
		"""
		cwd = cwd or os.getcwd()
		result = get_skill_resolver().resolve_skills(_names(skills), cwd)
		return json.dumps({
			"injection": build_skill_injection(result.resolved),
			"missing": result.missing,
		}, indent=2)

	@mcp.tool()
	async def clear_skill_cache() -> str:
		"""Discard cached skill indexes and file contents."""
		get_skill_resolver().clear_cache()
		return json.dumps({"cleared": True}, indent=2)
