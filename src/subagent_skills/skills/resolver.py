"""
Skill resolution - turns requested skill names into injectable content.

A SkillResolver owns both caches (the per-cwd skill index and the file
content cache). Construct one and pass it around, or use the process-wide
instance from get_skill_resolver().
"""

import logging
from dataclasses import dataclass, field

from ..config import Config, get_config
from .content import ResolvedSkill, SkillContentCache
from .index import SkillIndexCache
from .sources import SourceKind

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
	"""Outcome of resolving a list of names."""
	resolved: list[ResolvedSkill] = field(default_factory=list)
	missing: list[str] = field(default_factory=list)

	def to_dict(self) -> dict:
		return {
			"resolved": [skill.to_dict() for skill in self.resolved],
			"missing": list(self.missing),
		}


@dataclass(frozen=True)
class SkillSummary:
	"""A discoverable skill as shown to callers."""
	name: str
	source: SourceKind
	description: str | None = None

	def to_dict(self) -> dict:
		return {"name": self.name, "source": self.source.value, "description": self.description}


class SkillResolver:
	"""Resolves skill names against the sources visible from a working directory."""

	def __init__(self, config: Config | None = None, index: SkillIndexCache | None = None):
		self.config = config or get_config()
		self.index = index or SkillIndexCache(self.config)
		self.contents = SkillContentCache(
			max_size=self.config.content_cache_size,
			policy=self.config.eviction_policy,
		)

	def resolve_skill_path(self, name: str, cwd: str) -> tuple[str, SourceKind] | None:
		"""Locate the winning file for a skill name."""
		entry = self.index.find(name, cwd)
		if entry is None:
			return None
		return entry.file_path, entry.source

	def read_skill(self, name: str, path: str, source: SourceKind) -> ResolvedSkill | None:
		return self.contents.read_skill(name, path, source)

	def resolve_skills(self, names: list[str], cwd: str) -> ResolveResult:
		"""
		Resolve skill names to their content.

		Blank names are skipped. Repeated names are resolved each time they appear.

		Args:
			names: Requested skill names
			cwd: Working directory whose sources are searched

		Returns:
			Resolved skills in request order, and the names that could not be loaded
		"""
		result = ResolveResult()
		for name in names:
			trimmed = name.strip()
			if not trimmed:
				continue

			location = self.resolve_skill_path(trimmed, cwd)
			if location is None:
				result.missing.append(trimmed)
				continue

			path, source = location
			skill = self.read_skill(trimmed, path, source)
			if skill is None:
				result.missing.append(trimmed)
			else:
				result.resolved.append(skill)

		if result.missing:
			logger.info(f"Unresolved skills for {cwd}: {', '.join(result.missing)}")
		return result

	def discover_available_skills(self, cwd: str) -> list[SkillSummary]:
		"""List every skill visible from cwd, sorted by name."""
		summaries = [
			SkillSummary(name=entry.name, source=entry.source, description=entry.description)
			for entry in self.index.get(cwd)
		]
		return sorted(summaries, key=lambda s: (s.name.casefold(), s.name))

	def clear_cache(self) -> None:
		"""Drop both caches so the next call rereads everything from disk."""
		self.index.clear()
		self.contents.clear()
		logger.debug("Skill caches cleared")


def build_skill_injection(skills: list[ResolvedSkill]) -> str:
	"""Render skills as <skill> blocks separated by blank lines."""
	if not skills:
		return ""
	return "\n\n".join(f'<skill name="{s.name}">\n{s.content}\n</skill>' for s in skills)


def normalize_skill_input(value: str | list[str] | bool | None) -> list[str] | bool | None:
	"""
	Normalize a user-supplied skills option.

	Returns:
		False when skills are explicitly disabled, None when defaults should be
		used (True or no value), otherwise the unique non-blank names in order
	"""
	if value is False:
		return False
	if value is True or value is None:
		return None

	items = value.split(",") if isinstance(value, str) else value
	names: list[str] = []
	for item in items:
		trimmed = item.strip()
		if trimmed and trimmed not in names:
			names.append(trimmed)
	return names


# Global resolver instance
_resolver: SkillResolver | None = None


def get_skill_resolver() -> SkillResolver:
	"""Get or create the global skill resolver instance."""
	global _resolver
	if _resolver is None:
		_resolver = SkillResolver(get_config())
	return _resolver


def clear_skill_cache() -> None:
	"""Clear the caches of the global resolver."""
	if _resolver is not None:
		_resolver.clear_cache()
