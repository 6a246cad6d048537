"""CLI for subagent-skills: list, resolve, paths, doctor and serve commands."""

import argparse
import json
import os
import sys
import tomllib
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .config import load_config
from .logging_config import setup_logging
from .skills import (
	PathCollector,
	SkillResolver,
	build_skill_injection,
	normalize_skill_input,
)

SOURCE_STYLES = {
	"project": "green",
	"project-settings": "green",
	"project-package": "green",
	"user": "cyan",
	"user-settings": "cyan",
	"user-package": "cyan",
	"extension": "magenta",
	"builtin": "blue",
	"unknown": "dim",
}


def _cwd(args: argparse.Namespace) -> str:
	return os.path.abspath(getattr(args, "cwd", None) or os.getcwd())


def cmd_list(args: argparse.Namespace, console: Console | None = None) -> None:
	"""List skills visible from the working directory."""
	console = console or Console()
	resolver = SkillResolver(load_config())
	cwd = _cwd(args)
	skills = resolver.discover_available_skills(cwd)

	if getattr(args, "json", False):
		print(json.dumps([s.to_dict() for s in skills], indent=2))
		return

	if not skills:
		console.print(f"[dim]No skills found for {cwd}.[/dim]")
		return

	table = Table(title=f"Skills ({len(skills)})")
	table.add_column("Name", style="cyan")
	table.add_column("Source")
	table.add_column("Description")
	for skill in skills:
		style = SOURCE_STYLES.get(skill.source.value, "")
		table.add_row(
			skill.name,
			f"[{style}]{skill.source.value}[/{style}]" if style else skill.source.value,
			skill.description or "",
		)
	console.print(table)


def cmd_resolve(args: argparse.Namespace) -> None:
	"""Resolve skill names and print their content."""
	names = normalize_skill_input(args.names) or []
	resolver = SkillResolver(load_config())
	result = resolver.resolve_skills(names, _cwd(args))

	if getattr(args, "json", False):
		print(json.dumps(result.to_dict(), indent=2))
	elif getattr(args, "inject", False):
		injection = build_skill_injection(result.resolved)
		if injection:
			print(injection)
	else:
		for skill in result.resolved:
			print(f"{skill.name} ({skill.source.value}): {skill.path}")

	if result.missing:
		print(f"Missing skills: {', '.join(result.missing)}", file=sys.stderr)
		sys.exit(1)


def cmd_paths(args: argparse.Namespace) -> None:
	"""Show the directories searched for skills, in order."""
	collector = PathCollector(load_config())
	for search_path in collector.collect(_cwd(args)):
		marker = "" if Path(search_path.path).exists() else "  (missing)"
		print(f"{search_path.origin or '-':10s} {search_path.path}{marker}")


def _check_config_toml(config_dir: Path) -> tuple[str, str | None]:
	"""Validate config.toml. Returns (status, issue_or_none)."""
	toml_path = config_dir / "config.toml"
	if not toml_path.exists():
		return "not found (optional)", None
	try:
		with open(toml_path, "rb") as f:
			tomllib.load(f)
		return "valid", None
	except tomllib.TOMLDecodeError as e:
		msg = f"config.toml parse error: {e}"
		return f"INVALID ({e})", msg


def cmd_doctor(args: argparse.Namespace) -> None:
	"""Health check - verify configuration and skill sources."""
	print("subagent-skills doctor")
	print(f"{'=' * 40}")

	issues: list[str] = []
	try:
		config = load_config()
	except (ValueError, tomllib.TOMLDecodeError) as e:
		print(f"  Config:       INVALID ({e})")
		sys.exit(1)

	toml_status, toml_issue = _check_config_toml(config.config_dir)
	print(f"  config.toml:  {toml_status}")
	if toml_issue:
		issues.append(toml_issue)
	print(f"  Agent dir:    {config.agent_dir}")
	print(f"  Cache:        {config.content_cache_size} files, {config.eviction_policy}, index TTL {config.index_ttl_ms}ms")
	print()

	collector = PathCollector(config)
	cwd = _cwd(args)
	contributions = collector.package_contributions(cwd) + collector.settings_contributions(cwd)
	print("  Sources:")
	for contribution in contributions:
		if contribution.ok:
			print(f"    {contribution.source_file}: {len(contribution.paths)} paths")
		elif contribution.error != "missing":
			print(f"    {contribution.source_file}: {contribution.error}")
			issues.append(f"{contribution.source_file}: {contribution.error}")
	print()

	if issues:
		print(f"Issues found ({len(issues)}):")
		for issue in issues:
			print(f"  - {issue}")
		sys.exit(1)
	print("All checks passed.")


def cmd_serve(args: argparse.Namespace) -> None:
	"""Run the MCP server (stdio transport)."""
	from .server import mcp
	mcp.run()


def main() -> None:
	"""CLI entry point."""
	parser = argparse.ArgumentParser(
		prog="subagent-skills",
		description="Resolve and inject skills for subagents",
	)
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
	subparsers = parser.add_subparsers(dest="command")

	# list
	list_parser = subparsers.add_parser("list", help="List available skills")
	list_parser.add_argument("--cwd", type=str, default=None, help="Working directory (default: current)")
	list_parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
	list_parser.set_defaults(func=cmd_list)

	# resolve
	resolve_parser = subparsers.add_parser("resolve", help="Resolve skills by name")
	resolve_parser.add_argument("names", type=str, help="Comma-separated skill names")
	resolve_parser.add_argument("--cwd", type=str, default=None, help="Working directory (default: current)")
	resolve_parser.add_argument("--inject", action="store_true", help="Print the injection block")
	resolve_parser.add_argument("--json", action="store_true", help="Print JSON")
	resolve_parser.set_defaults(func=cmd_resolve)

	# paths
	paths_parser = subparsers.add_parser("paths", help="Show skill search paths")
	paths_parser.add_argument("--cwd", type=str, default=None, help="Working directory (default: current)")
	paths_parser.set_defaults(func=cmd_paths)

	# doctor
	doctor_parser = subparsers.add_parser("doctor", help="Health check")
	doctor_parser.add_argument("--cwd", type=str, default=None, help="Working directory (default: current)")
	doctor_parser.set_defaults(func=cmd_doctor)

	# serve
	serve_parser = subparsers.add_parser("serve", help="Run MCP server (stdio)")
	serve_parser.set_defaults(func=cmd_serve)

	args = parser.parse_args()

	if not args.command:
		parser.print_help()
		sys.exit(1)

	try:
		config = load_config()
	except (ValueError, tomllib.TOMLDecodeError) as e:
		if args.command == "doctor":
			args.func(args)
		print(f"Configuration error: {e}", file=sys.stderr)
		sys.exit(2)

	config.ensure_dirs()
	setup_logging(
		"DEBUG" if args.verbose else os.getenv("LOG_LEVEL", "WARNING"),
		log_dir=config.log_dir,
	)
	args.func(args)
