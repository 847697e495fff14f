# ♥♥─── Settings Model ───────────────────────────────────────────────────────────
from __future__ import annotations

from typing import Any
from pathlib import Path
from functools import lru_cache

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from questboard.custom_logger import log


@lru_cache
def get_project_root() -> Path:
	"""Detect the project root intelligently."""
	current = Path.cwd()
	for parent in [current, *list(current.parents)]:
		if any((parent / indicator).exists() for indicator in ["pyproject.toml", ".git"]):
			return parent
	return current


root = get_project_root()
app_data = root / "app_data"


@lru_cache
def get_default_env_path() -> Path:
	"""Get the default path for the main environment file."""
	return root / "app_data/config/.env"


# ─── Default Content Constants ────────────────────────────────────────────────
ENV_DEFAULT_CONTENT = """# QuestBoard Configuration File
# ─── Remote State Service ──────────────────────────────────────────
# REMOTE_BASE_URL=http://localhost:4000/
# REMOTE_API_TOKEN=your-session-token
# REMOTE_TIMEOUT_SECONDS=15
# ─── Session ───────────────────────────────────────────────────────
# SESSION_USER_ID=your-user-id
# ─── Storage Configuration ─────────────────────────────────────────
# STORAGE_DB_DIR=database
# STORAGE_DB_FILENAME=questboard.db
# ─── Game Rules ────────────────────────────────────────────────────
# GAME_DEBOUNCE_SECONDS=1.0
# GAME_TASK_PENALTY=20
# GAME_HABIT_PENALTY=10
# GAME_BOOK_PENALTY=20
# GAME_JOURNAL_PENALTY=50
# GAME_JOURNAL_BONUS=50
# GAME_DAILY_BONUS=500
"""


# ─── Configuration Paths Component ────────────────────────────────────────────
class ConfigPaths(BaseSettings):
	"""Optional configuration for application directory structure and file paths."""

	model_config = SettingsConfigDict(
		env_prefix="CONFIG_",
		case_sensitive=False,
		extra="ignore",
		env_file=get_default_env_path(),
	)

	@computed_field
	@property
	def app_data_dir(self) -> Path:
		"""Base directory for all application data storage.

		:return: The path to the application data directory.
		"""
		return app_data

	@computed_field
	@property
	def config_dir(self) -> Path:
		"""Directory containing all configuration files.

		:return: The path to the configuration directory.
		"""
		return self.app_data_dir / "config"

	@computed_field
	@property
	def env_file_path(self) -> Path:
		"""The path to the main .env configuration file.

		:return: The path to the .env file.
		"""
		return self.config_dir / ".env"

	def ensure_env_file(self) -> None:
		"""Write a commented default .env file when none exists yet."""
		if self.env_file_path.exists():
			return
		try:
			self.config_dir.mkdir(parents=True, exist_ok=True)
			self.env_file_path.write_text(ENV_DEFAULT_CONTENT, encoding="utf-8")
			log.info("Created default configuration file: {}", self.env_file_path)
		except OSError as e:
			log.warning("Could not create default configuration file: {}", e)


# ─── Remote State Service ─────────────────────────────────────────────────────
class RemoteSettings(BaseSettings):
	"""Connection settings for the remote state document service."""

	model_config = SettingsConfigDict(
		env_prefix="REMOTE_",
		env_file_encoding="utf-8",
		case_sensitive=False,
		extra="ignore",
		env_file=get_default_env_path(),
	)
	base_url: str = Field(
		default="http://localhost:4000/",
		pattern=r"^https?://.+",
		title="Service Base URL",
		description="Root URL of the state service; endpoints live under /api",
		examples=["http://localhost:4000/", "https://questboard.example.com/"],
	)
	api_token: SecretStr | None = Field(
		default=None,
		title="Session Token",
		description="Bearer token sent with every request.\nKeep this secret and secure.",
	)
	timeout_seconds: float = Field(
		default=15.0,
		gt=0,
		le=300,
		title="Request Timeout (Seconds)",
		description="Total timeout applied to each remote request",
		examples=[5, 15, 30],
	)

	@field_validator("api_token")
	@classmethod
	def validate_api_token(cls, v: SecretStr | None) -> SecretStr | None:
		"""Treat a blank token as no token."""
		if v is None:
			return None
		if not v.get_secret_value().strip():
			return None
		return v


# ─── Session ──────────────────────────────────────────────────────────────────
class SessionSettings(BaseSettings):
	"""Identity used when a session is started from the command line."""

	model_config = SettingsConfigDict(
		env_prefix="SESSION_",
		env_file_encoding="utf-8",
		case_sensitive=False,
		extra="ignore",
		env_file=get_default_env_path(),
	)
	user_id: str | None = Field(
		default=None,
		title="User ID",
		description="Identifier of the user whose state is loaded",
		min_length=1,
		max_length=128,
		examples=["6650f1c2a9b8e3d4f5a6b7c8"],
	)


# ─── Storage Configuration ───────────────────────────────────────────────────────────
class StorageSettings(BaseSettings):
	"""Optional configuration for customizing the local cache location."""

	model_config = SettingsConfigDict(
		env_prefix="STORAGE_",
		env_file_encoding="utf-8",
		case_sensitive=False,
		extra="ignore",
		env_file=get_default_env_path(),
	)
	db_dir: str = Field(
		default="database",
		title="Database Directory Name",
		description="The subdirectory for the local cache database",
		min_length=1,
		max_length=255,
		pattern=r"^[a-zA-Z0-9_\-\.]+$",
		examples=["database", "db", "sqlite_data"],
	)
	db_filename: str = Field(
		default="questboard.db",
		title="Local Cache Filename",
		description="Filename for the local cache database",
		min_length=1,
		max_length=255,
		pattern=r"^[a-zA-Z0-9_\-\.]+\.(db|sqlite|sqlite3)$",
		examples=["questboard.db", "cache.sqlite", "state.sqlite3"],
	)

	def get_database_directory(self) -> Path:
		"""Get the full path to the database directory."""
		return app_data / self.db_dir

	def get_database_file_path(self) -> Path:
		"""Get the full path to the local cache database file."""
		return self.get_database_directory() / self.db_filename

	def get_database_url(self) -> str:
		"""Get the SQLAlchemy URL of the local cache database."""
		return f"sqlite:///{self.get_database_file_path()}"

	def ensure_directories_exist(self) -> None:
		"""Create the storage directory if it doesn't already exist."""
		self.get_database_directory().mkdir(parents=True, exist_ok=True)


# ─── Game Rules ───────────────────────────────────────────────────────────────
class GameSettings(BaseSettings):
	"""Point values and timings of the gamification rules."""

	model_config = SettingsConfigDict(
		env_prefix="GAME_",
		env_file_encoding="utf-8",
		case_sensitive=False,
		extra="ignore",
		env_file=get_default_env_path(),
	)
	debounce_seconds: float = Field(
		default=1.0,
		ge=0,
		le=60,
		title="Write Debounce (Seconds)",
		description="Quiet period after the last change before the state is saved remotely",
	)
	task_penalty: int = Field(default=20, ge=0, title="Missed Task Penalty")
	habit_penalty: int = Field(default=10, ge=0, title="Missed Habit Penalty")
	book_penalty: int = Field(default=20, ge=0, title="Overdue Book Penalty")
	journal_penalty: int = Field(default=50, ge=0, title="Missed Journal Penalty")
	journal_bonus: int = Field(default=50, ge=0, title="Journal Entry Bonus")
	daily_bonus: int = Field(
		default=500,
		ge=0,
		title="Day Conquered Bonus",
		description="Awarded once per day when every task dated today is completed",
	)
	default_points: int = Field(
		default=100,
		ge=0,
		title="Default Task Points",
		description="Fallback when no score suggestion is available",
	)


# ─── Application Settings ─────────────────────────────────────────────────────
class ApplicationSettings(BaseSettings):
	"""Main application settings model for QuestBoard."""

	model_config = SettingsConfigDict(
		case_sensitive=False,
		extra="ignore",
		title="QuestBoard Application Configuration",
		env_file=str(get_default_env_path()),
		env_file_encoding="utf-8",
	)
	remote: RemoteSettings = Field(default_factory=RemoteSettings, title="Remote State Service")
	session: SessionSettings = Field(default_factory=SessionSettings, title="Session")
	paths: ConfigPaths = Field(default_factory=ConfigPaths, title="Application Paths Configuration")
	storage: StorageSettings = Field(default_factory=StorageSettings, title="Storage Configuration")
	game: GameSettings = Field(default_factory=GameSettings, title="Game Rules")

	def get_configuration_summary(self) -> dict[str, Any]:
		"""Return a summary of the current configuration (excluding sensitive data).

		:return: A dictionary summarizing the configuration.
		"""
		return {
			"config_directory": str(self.paths.config_dir),
			"env_file": str(self.paths.env_file_path),
			"remote_base_url": str(self.remote.base_url),
			"remote_authenticated": self.remote.api_token is not None,
			"session_user_configured": self.session.user_id is not None,
			"storage_db_filename": self.storage.db_filename,
			"debounce_seconds": self.game.debounce_seconds,
		}
