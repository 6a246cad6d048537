"""
Skill Loader - Discovers raw skill records from search directories.

A search directory may hold:
- <dir>/<name>.md (a single-file skill named after the file)
- <dir>/**/<skill-name>/SKILL.md (a skill directory named after the directory)

Optional YAML frontmatter supplies name and description. Records are returned
in scan order and are not merged; name conflicts are resolved by the index.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .paths import SkillSearchPath, default_search_paths

logger = logging.getLogger(__name__)

SKILL_FILENAME = "SKILL.md"
SKIPPED_DIRS = {"node_modules"}

_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n---[^\n]*(?:\n|$)", re.DOTALL)


@dataclass
class RawSkill:
	"""A skill found on disk, before source refinement and merging."""
	name: str
	file_path: str
	description: str | None = None
	source: str | None = None


@dataclass
class LoadSkillsResult:
	"""Skills found by a scan plus anything worth reporting about it."""
	skills: list[RawSkill] = field(default_factory=list)
	diagnostics: list[str] = field(default_factory=list)


def parse_frontmatter(content: str) -> dict | None:
	"""
	Parse the YAML frontmatter of a skill file.

	Returns:
		The frontmatter mapping ({} when there is none), or None if it is invalid
	"""
	match = _FRONTMATTER_RE.match(content.replace("\r\n", "\n"))
	if not match:
		return {}

	try:
		data = yaml.safe_load(match.group(1))
	except yaml.YAMLError:
		return None

	if data is None:
		return {}
	if not isinstance(data, dict):
		return None
	return data


class SkillScanner:
	"""
	Scans search paths for skill files.

	Each record carries the origin tag of the search path that produced it.
	A file reachable through more than one search path is reported once.
	"""

	def __init__(self):
		self._seen_files: set[str] = set()
		self._result = LoadSkillsResult()

	def scan(self, search_paths: list[SkillSearchPath]) -> LoadSkillsResult:
		for search_path in search_paths:
			self._scan_root(search_path)

		names: dict[str, str] = {}
		for skill in self._result.skills:
			if skill.name in names:
				self._result.diagnostics.append(
					f"Skill '{skill.name}' at {skill.file_path} collides with {names[skill.name]}"
				)
			else:
				names[skill.name] = skill.file_path
		return self._result

	def _scan_root(self, search_path: SkillSearchPath) -> None:
		root = Path(search_path.path)
		if root.is_file():
			if root.suffix == ".md":
				default_name = root.parent.name if root.name == SKILL_FILENAME else root.stem
				self._load_file(root, default_name, search_path.origin)
			return
		if not root.is_dir():
			return

		for entry in self._list_dir(root):
			if entry.is_file() and entry.suffix == ".md":
				if entry.name == SKILL_FILENAME:
					self._load_file(entry, root.name, search_path.origin)
				else:
					self._load_file(entry, entry.stem, search_path.origin)
			elif entry.is_dir():
				self._scan_skill_dirs(entry, search_path.origin)

	def _scan_skill_dirs(self, directory: Path, origin: str | None) -> None:
		skill_file = directory / SKILL_FILENAME
		if skill_file.is_file():
			self._load_file(skill_file, directory.name, origin)
			return

		for entry in self._list_dir(directory):
			if entry.is_dir():
				self._scan_skill_dirs(entry, origin)

	def _list_dir(self, directory: Path) -> list[Path]:
		try:
			entries = sorted(directory.iterdir(), key=lambda p: p.name)
		except OSError as e:
			logger.debug(f"Cannot list {directory}: {e}")
			return []
		return [
			entry for entry in entries
			if not entry.name.startswith(".") and entry.name not in SKIPPED_DIRS
		]

	def _load_file(self, skill_file: Path, default_name: str, origin: str | None) -> None:
		file_path = os.path.abspath(skill_file)
		real_path = os.path.realpath(file_path)
		if real_path in self._seen_files:
			return
		self._seen_files.add(real_path)

		try:
			content = skill_file.read_text(encoding="utf-8")
		except (OSError, UnicodeDecodeError) as e:
			logger.warning(f"Failed to read skill file {file_path}: {e}")
			self._result.diagnostics.append(f"Unreadable skill file {file_path}")
			return

		frontmatter = parse_frontmatter(content)
		if frontmatter is None:
			logger.warning(f"Invalid YAML frontmatter in {file_path}")
			self._result.diagnostics.append(f"Invalid frontmatter in {file_path}")
			return

		name = str(frontmatter.get("name") or "").strip() or default_name
		description = frontmatter.get("description")
		self._result.skills.append(RawSkill(
			name=name,
			file_path=file_path,
			description=str(description).strip() if description is not None else None,
			source=origin,
		))


def load_skills(
	cwd: str,
	search_paths: list[SkillSearchPath],
	include_defaults: bool = False,
	config=None,
) -> LoadSkillsResult:
	"""
	Load raw skill records from explicit search paths.

	Args:
		cwd: Working directory
		search_paths: Directories (or single .md files) to scan, in order
		include_defaults: Also scan the default project and user directories first
		config: Config used to locate the defaults (required with include_defaults)

	Returns:
		Records in scan order with their origin tags
	"""
	paths = list(search_paths)
	if include_defaults:
		if config is None:
			raise ValueError("config is required when include_defaults is set")
		paths = default_search_paths(cwd, config) + paths

	result = SkillScanner().scan(paths)
	logger.debug(f"Scanned {len(paths)} search paths, found {len(result.skills)} skills")
	return result
