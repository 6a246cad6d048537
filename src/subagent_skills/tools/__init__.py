"""MCP tool registration."""

from mcp.server.fastmcp import FastMCP

from ..config import Config
from .skills import register_skills_tools


def register_all_tools(mcp: FastMCP, config: Config) -> None:
	"""Register all MCP tools."""
	register_skills_tools(mcp, config)
