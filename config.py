"""Configuration management for Finans.

Reads configuration from ~/.config/finans.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional
import tomllib
import tomli_w


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    archive_enabled: bool
    archive_dir: Path
    default_currency: str = "TRY"
    llm_provider: Optional[str] = "openai"
    llm_openai_api_key: str = ""
    llm_openai_model: Optional[str] = None
    llm_gemini_api_key: str = ""
    llm_gemini_model: Optional[str] = None
    enable_reset: bool = False

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "finans"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="finans.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
            archive_enabled=True,
            archive_dir=base_dir / "statements",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "finans.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return config_from_dict(data)


def config_from_dict(data: dict) -> Config:
    """Build a Config from parsed TOML data, filling in defaults.

    Args:
        data: Dictionary as produced by tomllib.

    Returns:
        Config object.
    """
    defaults = Config.default()
    base_dir = Path(data.get("base_dir", defaults.base_dir))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", defaults.db_filename)

    log_config = data.get("logging", {})
    log_level = log_config.get("level", defaults.log_level)
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    archive_config = data.get("archive", {})
    archive_enabled = archive_config.get("enabled", True)
    archive_dir = Path(archive_config.get("archive_dir", base_dir / "statements"))

    ledger_config = data.get("ledger", {})
    default_currency = ledger_config.get("default_currency", defaults.default_currency)

    llm_config = data.get("llm", {})

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        archive_enabled=archive_enabled,
        archive_dir=archive_dir,
        default_currency=default_currency,
        llm_provider=llm_config.get("provider", defaults.llm_provider) or None,
        llm_openai_api_key=llm_config.get("openai_api_key", ""),
        llm_openai_model=llm_config.get("openai_model") or None,
        llm_gemini_api_key=llm_config.get("gemini_api_key", ""),
        llm_gemini_model=llm_config.get("gemini_model") or None,
        enable_reset=data.get("enable_reset", False),
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # tomli_w cannot serialize None, so optional values are written as ""
    data = {
        "base_dir": str(config.base_dir),
        "enable_reset": config.enable_reset,
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "archive": {
            "enabled": config.archive_enabled,
            "archive_dir": str(config.archive_dir),
        },
        "ledger": {
            "default_currency": config.default_currency,
        },
        "llm": {
            "provider": config.llm_provider or "",
            "openai_api_key": config.llm_openai_api_key,
            "openai_model": config.llm_openai_model or "",
            "gemini_api_key": config.llm_gemini_api_key,
            "gemini_model": config.llm_gemini_model or "",
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
