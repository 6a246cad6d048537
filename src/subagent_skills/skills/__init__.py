"""Skills module - Skill discovery, resolution and caching."""

from .content import ResolvedSkill, SkillContentCache, strip_frontmatter
from .index import IndexedSkillEntry, SkillIndexCache, merge_skills
from .loader import RawSkill, load_skills
from .paths import PathCollector, SkillSearchPath
from .resolver import (
	ResolveResult,
	SkillResolver,
	SkillSummary,
	build_skill_injection,
	clear_skill_cache,
	get_skill_resolver,
	normalize_skill_input,
)
from .sources import SOURCE_PRIORITY, SourceKind, classify_source, is_within_path

__all__ = [
	"SkillResolver",
	"ResolveResult",
	"ResolvedSkill",
	"SkillSummary",
	"SourceKind",
	"SOURCE_PRIORITY",
	"classify_source",
	"is_within_path",
	"PathCollector",
	"SkillSearchPath",
	"RawSkill",
	"load_skills",
	"IndexedSkillEntry",
	"SkillIndexCache",
	"merge_skills",
	"SkillContentCache",
	"strip_frontmatter",
	"build_skill_injection",
	"normalize_skill_input",
	"get_skill_resolver",
	"clear_skill_cache",
]
