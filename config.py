"""Configuration management for budgetbook.

Reads configuration from ~/.config/budgetbook.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional
import tomllib
import tomli_w

from budgeting.category_filter import DEFAULT_EXCLUDED_CATEGORIES


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    excluded_categories: List[str] = field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_CATEGORIES)
    )

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        base_dir = Path.home() / "data" / "budgetbook"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="budgetbook.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "budgetbook.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def get_seed_dir() -> Path:
    """Get the path to the seed data directory."""
    return Path(__file__).parent / "db" / "seed"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Args:
        config_path: Optional override of the config file location.

    Returns:
        Config object with loaded or default values.
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        config = Config.default()
        _write_config(config, config_path)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Missing keys fall back to the defaults
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "budgetbook"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "budgetbook.db")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    budget_config = data.get("budgets", {})
    excluded_categories = budget_config.get(
        "excluded_categories", list(DEFAULT_EXCLUDED_CATEGORIES)
    )
    if not isinstance(excluded_categories, list) or not all(
        isinstance(name, str) for name in excluded_categories
    ):
        raise ValueError("budgets.excluded_categories must be a list of strings")

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        excluded_categories=excluded_categories,
    )


def _write_config(config: Config, config_path: Path) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
        config_path: Destination TOML file.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "budgets": {
            "excluded_categories": list(config.excluded_categories),
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
