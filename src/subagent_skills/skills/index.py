"""
Skill index - merges discovered skills by source priority and caches the result per cwd.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Callable

from ..config import Config
from .loader import RawSkill, load_skills
from .paths import PathCollector
from .sources import SourceKind, classify_source

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 5000


@dataclass(frozen=True)
class IndexedSkillEntry:
	"""The winning record for one skill name."""
	name: str
	file_path: str
	source: SourceKind
	description: str | None = None
	order: int = 0


def choose_higher_priority(
	existing: IndexedSkillEntry | None,
	candidate: IndexedSkillEntry,
) -> IndexedSkillEntry:
	"""Pick the entry with the higher source priority; earlier discovery wins ties."""
	if existing is None:
		return candidate
	if candidate.source.priority > existing.source.priority:
		return candidate
	if candidate.source.priority < existing.source.priority:
		return existing
	return candidate if candidate.order < existing.order else existing


def merge_skills(candidates: list[IndexedSkillEntry]) -> list[IndexedSkillEntry]:
	"""
	Keep one entry per name.

	Args:
		candidates: Classified entries in scan order

	Returns:
		Winners sorted by their discovery order
	"""
	by_name: dict[str, IndexedSkillEntry] = {}
	for candidate in candidates:
		current = by_name.get(candidate.name)
		winner = choose_higher_priority(current, candidate)
		if current is not None:
			loser = candidate if winner is current else current
			logger.debug(
				f"Skill '{candidate.name}': {winner.source.value} at {winner.file_path} "
				f"shadows {loser.source.value} at {loser.file_path}"
			)
		by_name[candidate.name] = winner
	return sorted(by_name.values(), key=lambda entry: entry.order)


def classify_raw_skills(raw_skills: list[RawSkill], cwd: str, config: Config) -> list[IndexedSkillEntry]:
	"""Turn raw loader records into classified entries numbered in scan order."""
	project_root = config.project_config_dir(cwd)
	return [
		IndexedSkillEntry(
			name=skill.name,
			file_path=skill.file_path,
			source=classify_source(skill.source, skill.file_path, project_root, config.agent_dir),
			description=skill.description,
			order=i,
		)
		for i, skill in enumerate(raw_skills)
	]


@dataclass
class _IndexSlot:
	cwd: str
	skills: list[IndexedSkillEntry]
	timestamp_ms: float


def _monotonic_ms() -> float:
	return time.monotonic() * 1000


class SkillIndexCache:
	"""
	Single-slot, time-boxed cache of the merged skill index.

	Only one cwd is held at a time; asking for another cwd, or asking after
	the TTL has elapsed, rebuilds the index from disk.
	"""

	def __init__(
		self,
		config: Config,
		ttl_ms: int | None = None,
		clock: Callable[[], float] = _monotonic_ms,
	):
		self.config = config
		self.ttl_ms = config.index_ttl_ms if ttl_ms is None else ttl_ms
		self.collector = PathCollector(config)
		self._clock = clock
		self._slot: _IndexSlot | None = None

	@property
	def cached_cwd(self) -> str | None:
		return self._slot.cwd if self._slot else None

	def get(self, cwd: str) -> list[IndexedSkillEntry]:
		"""Return the skill index for cwd, rebuilding it when stale."""
		cwd = os.path.abspath(cwd)
		now = self._clock()
		if self._slot and self._slot.cwd == cwd and now - self._slot.timestamp_ms < self.ttl_ms:
			return self._slot.skills

		skills = self.build(cwd)
		self._slot = _IndexSlot(cwd=cwd, skills=skills, timestamp_ms=now)
		return skills

	def build(self, cwd: str) -> list[IndexedSkillEntry]:
		"""Scan the filesystem and merge, bypassing the cache."""
		search_paths = self.collector.collect(cwd)
		loaded = load_skills(cwd, search_paths, include_defaults=False)
		for diagnostic in loaded.diagnostics:
			logger.debug(diagnostic)

		skills = merge_skills(classify_raw_skills(loaded.skills, cwd, self.config))
		logger.info(f"Indexed {len(skills)} skills from {len(search_paths)} search paths for {cwd}")
		return skills

	def find(self, name: str, cwd: str) -> IndexedSkillEntry | None:
		for entry in self.get(cwd):
			if entry.name == name:
				return entry
		return None

	def clear(self) -> None:
		self._slot = None
