"""
Skill content loading with an mtime-validated, size-bounded cache.

Entries are keyed by file path and trusted only while the file's modification
time is unchanged. When the cache is full the oldest entry is evicted: the
earliest inserted for the "fifo" policy, the least recently read for "lru".
"""

import logging
import os
from collections import OrderedDict
from dataclasses import dataclass

from .sources import SourceKind

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"
DEFAULT_CACHE_SIZE = 50


@dataclass(frozen=True)
class ResolvedSkill:
	"""A skill ready to be injected: body text with frontmatter removed."""
	name: str
	path: str
	content: str
	source: SourceKind

	def to_dict(self) -> dict:
		return {
			"name": self.name,
			"path": self.path,
			"content": self.content,
			"source": self.source.value,
		}


def strip_frontmatter(content: str) -> str:
	"""
	Remove a leading frontmatter block.

	The block opens with "---" at the very start and closes at the next line
	beginning with "---". Without a closing line the text is returned as is.
	"""
	normalized = content.replace("\r\n", "\n")
	if not normalized.startswith(FRONTMATTER_DELIMITER):
		return normalized

	end = normalized.find("\n" + FRONTMATTER_DELIMITER, len(FRONTMATTER_DELIMITER))
	if end == -1:
		return normalized

	return normalized[end + 1 + len(FRONTMATTER_DELIMITER):].strip()


@dataclass
class _CacheEntry:
	mtime_ns: int
	skill: ResolvedSkill


class SkillContentCache:
	"""
	Caches parsed skill files by path.

	Args:
		max_size: Maximum number of cached files
		policy: "fifo" evicts by insertion order and ignores reads;
			"lru" moves an entry to the back each time it is read
	"""

	def __init__(self, max_size: int = DEFAULT_CACHE_SIZE, policy: str = "fifo"):
		if policy not in ("fifo", "lru"):
			raise ValueError(f"Unknown eviction policy: {policy}")
		self.max_size = max_size
		self.policy = policy
		self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()

	def __len__(self) -> int:
		return len(self._entries)

	def __contains__(self, path: object) -> bool:
		return path in self._entries

	def keys(self) -> list[str]:
		"""Cached paths in eviction order, next victim first."""
		return list(self._entries)

	def get(self, path: str, mtime_ns: int) -> ResolvedSkill | None:
		entry = self._entries.get(path)
		if entry is None or entry.mtime_ns != mtime_ns:
			return None
		if self.policy == "lru":
			self._entries.move_to_end(path)
		return entry.skill

	def put(self, path: str, mtime_ns: int, skill: ResolvedSkill) -> None:
		# Re-storing an existing path keeps its slot under fifo
		self._entries[path] = _CacheEntry(mtime_ns=mtime_ns, skill=skill)
		if self.policy == "lru":
			self._entries.move_to_end(path)

		while len(self._entries) > self.max_size:
			evicted, _ = self._entries.popitem(last=False)
			logger.debug(f"Evicted {evicted} from skill content cache")

	def clear(self) -> None:
		self._entries.clear()

	def read_skill(self, name: str, path: str, source: SourceKind) -> ResolvedSkill | None:
		"""
		Load a skill file, serving it from cache while its mtime is unchanged.

		Args:
			name: Name to report for the skill
			path: Absolute path of the skill file
			source: Provenance of the skill

		Returns:
			The resolved skill, or None if the file cannot be stat'd or read
		"""
		try:
			mtime_ns = os.stat(path).st_mtime_ns
		except OSError as e:
			logger.debug(f"Cannot stat skill file {path}: {e}")
			return None

		cached = self.get(path, mtime_ns)
		if cached is not None:
			logger.debug(f"Skill content cache hit: {path}")
			return cached

		try:
			with open(path, encoding="utf-8") as f:
				raw = f.read()
		except (OSError, UnicodeDecodeError) as e:
			logger.warning(f"Failed to read skill '{name}' from {path}: {e}")
			return None

		skill = ResolvedSkill(name=name, path=path, content=strip_frontmatter(raw), source=source)
		self.put(path, mtime_ns, skill)
		return skill
