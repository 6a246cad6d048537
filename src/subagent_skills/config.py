"""Configuration system using platformdirs for cross-platform paths."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import platformdirs

APP_NAME = "subagent-skills"

EVICTION_POLICIES = ("fifo", "lru")


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	log_dir: Path = field(init=False)

	# Skill discovery
	project_config_dir_name: str = ".pi"
	agent_dir: Path = field(default_factory=lambda: Path.home() / ".pi" / "agent")
	extension_skill_dirs: list[Path] = field(default_factory=list)
	builtin_skills_dir: Path | None = None

	# Caches
	index_ttl_ms: int = 5000
	content_cache_size: int = 50
	eviction_policy: str = "fifo"

	def __post_init__(self) -> None:
		self.log_dir = self.data_dir / "logs"

	def project_config_dir(self, cwd: str | Path) -> Path:
		"""The per-project config directory for a working directory."""
		return Path(os.path.abspath(cwd)) / self.project_config_dir_name

	def validate(self) -> None:
		"""Reject settings the caches cannot work with."""
		if self.eviction_policy not in EVICTION_POLICIES:
			raise ValueError(
				f"eviction_policy must be one of {EVICTION_POLICIES}, got {self.eviction_policy!r}"
			)
		if self.content_cache_size < 1:
			raise ValueError(f"content_cache_size must be positive, got {self.content_cache_size}")
		if self.index_ttl_ms < 0:
			raise ValueError(f"index_ttl_ms must not be negative, got {self.index_ttl_ms}")

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)


_PATH_FIELDS = {"config_dir", "data_dir", "agent_dir", "builtin_skills_dir"}
_INT_FIELDS = {"index_ttl_ms", "content_cache_size"}


def _apply_env_overrides(config: Config) -> Config:
	"""Apply SUBAGENT_SKILLS_* environment variable overrides."""
	env_map = {
		"SUBAGENT_SKILLS_CONFIG_DIR": "config_dir",
		"SUBAGENT_SKILLS_DATA_DIR": "data_dir",
		"SUBAGENT_SKILLS_AGENT_DIR": "agent_dir",
		"SUBAGENT_SKILLS_INDEX_TTL_MS": "index_ttl_ms",
		"SUBAGENT_SKILLS_CACHE_SIZE": "content_cache_size",
		"SUBAGENT_SKILLS_EVICTION": "eviction_policy",
	}
	for env_key, attr in env_map.items():
		val = os.getenv(env_key)
		if not val:
			continue
		if attr in _PATH_FIELDS:
			setattr(config, attr, Path(os.path.expanduser(val)))
		elif attr in _INT_FIELDS:
			try:
				setattr(config, attr, int(val))
			except ValueError:
				raise ValueError(f"{env_key} must be an integer, got {val!r}") from None
		else:
			setattr(config, attr, val.strip().lower())
	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		return config

	with open(toml_path, "rb") as f:
		data = tomllib.load(f)

	for key, val in data.items():
		if not hasattr(config, key) or key == "log_dir":
			continue
		if key in _PATH_FIELDS:
			setattr(config, key, Path(os.path.expanduser(val)))
		elif key == "extension_skill_dirs":
			setattr(config, key, [Path(os.path.expanduser(v)) for v in val])
		else:
			setattr(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	config = _apply_env_overrides(config)  # config_dir itself may come from env
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.validate()
	return config


# Singleton
_config: Config | None = None


def get_config() -> Config:
	"""Get or create the global config instance."""
	global _config
	if _config is None:
		_config = load_config()
	return _config
