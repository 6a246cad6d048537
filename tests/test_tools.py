"""Tests for the MCP skills tools."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from subagent_skills.skills import resolver as resolver_module
from subagent_skills.skills.resolver import SkillResolver
from subagent_skills.tools.skills import register_skills_tools
from tests.helpers import capture_tools, make_config, write_skill


@pytest.fixture
def tools(tmp_path: Path):
	config = make_config(tmp_path)
	write_skill(tmp_path / "proj" / ".pi" / "skills", "review", body="Review it.")
	write_skill(config.agent_dir / "skills", "deploy", description="Deploy the app")
	with patch.object(resolver_module, "_resolver", SkillResolver(config)):
		yield capture_tools(config, register_skills_tools)


def test_registers_tools(tools):
	assert set(tools) == {"list_skills", "resolve_skills", "get_skill_injection", "clear_skill_cache"}


@pytest.mark.asyncio
async def test_list_skills(tools, tmp_path: Path):
	data = json.loads(await tools["list_skills"](cwd=str(tmp_path / "proj")))
	assert data["total"] == 2
	assert data["skills"][0] == {"name": "deploy", "source": "user", "description": "Deploy the app"}


@pytest.mark.asyncio
async def test_resolve_skills(tools, tmp_path: Path):
	data = json.loads(await tools["resolve_skills"]("review, nope", cwd=str(tmp_path / "proj")))
	assert [s["name"] for s in data["resolved"]] == ["review"]
	assert data["resolved"][0]["source"] == "project"
	assert data["missing"] == ["nope"]


@pytest.mark.asyncio
async def test_get_skill_injection(tools, tmp_path: Path):
	data = json.loads(await tools["get_skill_injection"]("review", cwd=str(tmp_path / "proj")))
	assert data["injection"] == '<skill name="review">\nReview it.\n</skill>'
	assert data["missing"] == []


@pytest.mark.asyncio
async def test_clear_skill_cache(tools):
	data = json.loads(await tools["clear_skill_cache"]())
	assert data == {"cleared": True}
