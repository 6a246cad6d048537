"""
Skill search path collection.

Search directories come from, in order:
- Defaults: <cwd>/.pi/skills and ~/.pi/agent/skills
- Packages: "pi.skills" in package.json under <cwd>/.pi/npm/node_modules and
  ~/.pi/agent/npm/node_modules (one level of @scope directories included)
- Settings: "skills" in <cwd>/.pi/settings.json and ~/.pi/agent/settings.json
- Extensions and builtin skills from Config

A source that cannot be read contributes nothing; collection never fails.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..config import Config

logger = logging.getLogger(__name__)

SCOPE_PREFIX = "@"
PACKAGE_MANIFEST = "package.json"
SETTINGS_FILE = "settings.json"


@dataclass(frozen=True)
class SkillSearchPath:
	"""An absolute directory to search, tagged with what contributed it."""
	path: str
	origin: str | None = None


@dataclass
class SourceContribution:
	"""
	Paths contributed by one manifest or settings file.

	Empty on failure: when the file is missing, unreadable or malformed,
	paths is empty and error says why.
	"""
	origin: str
	source_file: str
	paths: list[str] = field(default_factory=list)
	error: str | None = None

	@property
	def ok(self) -> bool:
		return self.error is None


def _read_json(file_path: Path) -> tuple[object, str | None]:
	"""Read a JSON file, returning (data, error)."""
	try:
		content = file_path.read_text(encoding="utf-8")
	except FileNotFoundError:
		return None, "missing"
	except (OSError, UnicodeDecodeError) as e:
		return None, f"unreadable: {e}"

	try:
		return json.loads(content), None
	except json.JSONDecodeError as e:
		return None, f"malformed JSON: {e}"


def read_package_skill_paths(package_root: Path) -> SourceContribution:
	"""Read the pi.skills list from a package's manifest, resolved against the package root."""
	manifest = package_root / PACKAGE_MANIFEST
	contribution = SourceContribution(origin="package", source_file=str(manifest))

	data, error = _read_json(manifest)
	if error:
		contribution.error = error
		return contribution

	pi_section = data.get("pi") if isinstance(data, dict) else None
	skills = pi_section.get("skills") if isinstance(pi_section, dict) else None
	if not isinstance(skills, list):
		return contribution

	contribution.paths = [
		os.path.abspath(os.path.join(package_root, entry))
		for entry in skills
		if isinstance(entry, str)
	]
	return contribution


def read_settings_skill_paths(settings_file: Path, base_dir: Path) -> SourceContribution:
	"""
	Read the skills list from a settings file.

	Entries starting with "~/" are expanded to the home directory; other
	relative entries are resolved against base_dir.
	"""
	contribution = SourceContribution(origin="settings", source_file=str(settings_file))

	data, error = _read_json(settings_file)
	if error:
		contribution.error = error
		return contribution

	skills = data.get("skills") if isinstance(data, dict) else None
	if not isinstance(skills, list):
		return contribution

	for entry in skills:
		if not isinstance(entry, str):
			continue
		if entry.startswith("~/"):
			resolved = os.path.abspath(os.path.join(Path.home(), entry[2:]))
		elif os.path.isabs(entry):
			resolved = os.path.abspath(entry)
		else:
			resolved = os.path.abspath(os.path.join(base_dir, entry))
		contribution.paths.append(resolved)
	return contribution


def _list_package_dirs(container: Path) -> list[Path]:
	"""List package directories inside a node_modules-style container."""
	try:
		entries = sorted(os.scandir(container), key=lambda e: e.name)
	except OSError:
		return []

	packages: list[Path] = []
	for entry in entries:
		if entry.name.startswith("."):
			continue
		if not entry.is_dir() and not entry.is_symlink():
			continue

		if entry.name.startswith(SCOPE_PREFIX):
			try:
				scoped = sorted(os.scandir(entry.path), key=lambda e: e.name)
			except OSError:
				continue
			for scoped_entry in scoped:
				if scoped_entry.name.startswith("."):
					continue
				if not scoped_entry.is_dir() and not scoped_entry.is_symlink():
					continue
				packages.append(Path(scoped_entry.path))
			continue

		packages.append(Path(entry.path))
	return packages


def default_search_paths(cwd: str, config: Config) -> list[SkillSearchPath]:
	"""The project and user skill directories searched by default."""
	return [
		SkillSearchPath(str(config.project_config_dir(cwd) / "skills"), "project"),
		SkillSearchPath(str(config.agent_dir / "skills"), "user"),
	]


class PathCollector:
	"""Builds the ordered, de-duplicated list of skill search directories for a cwd."""

	def __init__(self, config: Config):
		self.config = config

	@property
	def user_package_container(self) -> Path:
		return self.config.agent_dir / "npm" / "node_modules"

	def project_package_container(self, cwd: str) -> Path:
		return self.config.project_config_dir(cwd) / "npm" / "node_modules"

	def default_paths(self, cwd: str) -> list[SkillSearchPath]:
		return default_search_paths(cwd, self.config)

	def package_contributions(self, cwd: str) -> list[SourceContribution]:
		contributions = []
		for container in (self.project_package_container(cwd), self.user_package_container):
			if not container.is_dir():
				continue
			for package_root in _list_package_dirs(container):
				contributions.append(read_package_skill_paths(package_root))
		return contributions

	def settings_contributions(self, cwd: str) -> list[SourceContribution]:
		project_dir = self.config.project_config_dir(cwd)
		agent_dir = self.config.agent_dir
		return [
			read_settings_skill_paths(project_dir / SETTINGS_FILE, project_dir),
			read_settings_skill_paths(agent_dir / SETTINGS_FILE, agent_dir),
		]

	def extra_paths(self) -> list[SkillSearchPath]:
		extras = [
			SkillSearchPath(os.path.abspath(os.path.expanduser(d)), "extension")
			for d in self.config.extension_skill_dirs
		]
		if self.config.builtin_skills_dir is not None:
			extras.append(SkillSearchPath(os.path.abspath(self.config.builtin_skills_dir), "builtin"))
		return extras

	def collect(self, cwd: str) -> list[SkillSearchPath]:
		"""
		Collect search paths for a working directory.

		Args:
			cwd: Working directory

		Returns:
			Search paths in precedence-independent discovery order; the first
			occurrence of a directory keeps its position and origin
		"""
		candidates = self.default_paths(cwd)

		for contribution in self.package_contributions(cwd) + self.settings_contributions(cwd):
			if not contribution.ok:
				if contribution.error == "missing":
					logger.debug(f"No {contribution.origin} source at {contribution.source_file}")
				else:
					logger.warning(
						f"Ignoring {contribution.origin} source {contribution.source_file}: {contribution.error}"
					)
				continue
			candidates.extend(SkillSearchPath(p, contribution.origin) for p in contribution.paths)

		candidates.extend(self.extra_paths())

		seen: set[str] = set()
		unique: list[SkillSearchPath] = []
		for candidate in candidates:
			if candidate.path in seen:
				continue
			seen.add(candidate.path)
			unique.append(candidate)
		return unique
