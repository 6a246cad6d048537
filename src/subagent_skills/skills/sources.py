"""
Skill provenance - source kinds, their priorities and path-based classification.

Raw loaders tag skills with a loose source string. Before merging, each tag is
refined into a SourceKind using where the file actually lives relative to the
project config directory and the user agent directory.
"""

import os
from enum import Enum
from pathlib import Path


class SourceKind(str, Enum):
	"""Provenance category of a skill."""
	PROJECT = "project"
	PROJECT_SETTINGS = "project-settings"
	PROJECT_PACKAGE = "project-package"
	USER = "user"
	USER_SETTINGS = "user-settings"
	USER_PACKAGE = "user-package"
	EXTENSION = "extension"
	BUILTIN = "builtin"
	UNKNOWN = "unknown"

	@property
	def priority(self) -> int:
		return SOURCE_PRIORITY[self]


SOURCE_PRIORITY: dict[SourceKind, int] = {
	SourceKind.PROJECT: 700,
	SourceKind.PROJECT_SETTINGS: 650,
	SourceKind.PROJECT_PACKAGE: 600,
	SourceKind.USER: 300,
	SourceKind.USER_SETTINGS: 250,
	SourceKind.USER_PACKAGE: 200,
	SourceKind.EXTENSION: 150,
	SourceKind.BUILTIN: 100,
	SourceKind.UNKNOWN: 0,
}

# Raw tags a loader may attach to a skill
RAW_SOURCE_TAGS = frozenset({"project", "user", "settings", "package", "extension", "builtin"})


def is_within_path(file_path: str | Path, directory: str | Path) -> bool:
	"""True if file_path is directory itself or lies beneath it."""
	try:
		relative = os.path.relpath(os.path.abspath(file_path), os.path.abspath(directory))
	except ValueError:
		# Different drives on Windows
		return False
	if relative == os.curdir:
		return True
	return relative != os.pardir and not relative.startswith(os.pardir + os.sep) and not os.path.isabs(relative)


def classify_source(
	raw_source: object,
	file_path: str | Path,
	project_root: str | Path,
	agent_dir: str | Path,
) -> SourceKind:
	"""
	Refine a raw source tag into a SourceKind.

	Args:
		raw_source: Tag reported by the loader; anything that is not a known string is ignored
		file_path: Absolute path of the skill file
		project_root: The project config directory (<cwd>/.pi)
		agent_dir: The user agent directory (~/.pi/agent)

	Returns:
		The refined source kind, UNKNOWN when provenance cannot be established
	"""
	source = raw_source if isinstance(raw_source, str) and raw_source in RAW_SOURCE_TAGS else ""

	if source == "project":
		return SourceKind.PROJECT
	if source == "user":
		return SourceKind.USER
	if source == "extension":
		return SourceKind.EXTENSION
	if source == "builtin":
		return SourceKind.BUILTIN

	in_project = is_within_path(file_path, project_root)
	in_user = is_within_path(file_path, agent_dir)

	if source == "settings":
		if in_project:
			return SourceKind.PROJECT_SETTINGS
		if in_user:
			return SourceKind.USER_SETTINGS
		return SourceKind.UNKNOWN
	if source == "package":
		if in_project:
			return SourceKind.PROJECT_PACKAGE
		if in_user:
			return SourceKind.USER_PACKAGE
		return SourceKind.UNKNOWN

	if in_project:
		return SourceKind.PROJECT
	if in_user:
		return SourceKind.USER
	return SourceKind.UNKNOWN
