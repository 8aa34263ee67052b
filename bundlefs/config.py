"""
Configuration management for bundlefs.

Handles loading and saving user configuration from:
- XDG config directory: ~/.config/bundlefs/config.json
- Fallback: ~/.bundlefs/config.json
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ExplorerConfig:
    """Resource lookup and traversal settings."""
    resource_prefix: str = "assets/"
    search_roots: List[str] = field(default_factory=list)
    package: Optional[str] = None
    follow_symlinks: bool = False
    max_depth: Optional[int] = None
    encoding: str = "utf-8"


@dataclass
class CLIConfig:
    """CLI default options."""
    verbose: bool = False
    color: bool = True


@dataclass
class BundleFSConfig:
    """Main bundlefs configuration."""
    explorer: ExplorerConfig = field(default_factory=ExplorerConfig)
    cli: CLIConfig = field(default_factory=CLIConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "explorer": asdict(self.explorer),
            "cli": asdict(self.cli),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BundleFSConfig':
        """Create from dictionary."""
        explorer_data = data.get("explorer", {})
        cli_data = data.get("cli", {})
        return cls(
            explorer=ExplorerConfig(**explorer_data),
            cli=CLIConfig(**cli_data),
        )


def get_config_path() -> Path:
    """
    Get configuration file path.

    Follows XDG Base Directory specification:
    1. ~/.config/bundlefs/config.json
    2. Fallback: ~/.bundlefs/config.json

    Returns:
        Path to config file
    """
    xdg_config_home = Path.home() / ".config"
    if xdg_config_home.exists():
        config_dir = xdg_config_home / "bundlefs"
    else:
        config_dir = Path.home() / ".bundlefs"

    return config_dir / "config.json"


def load_config() -> BundleFSConfig:
    """
    Load configuration from file.

    Returns:
        BundleFSConfig instance with loaded values or defaults
    """
    config_path = get_config_path()

    if not config_path.exists():
        return BundleFSConfig()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        return BundleFSConfig.from_dict(data)
    except (json.JSONDecodeError, OSError, TypeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Using default configuration")
        return BundleFSConfig()


def save_config(config: BundleFSConfig) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path


def ensure_config_exists() -> Path:
    """
    Ensure configuration file exists, creating with defaults if not.

    Returns:
        Path to config file
    """
    config_path = get_config_path()

    if not config_path.exists():
        save_config(BundleFSConfig())
        logger.info(f"Created default configuration at {config_path}")

    return config_path


def update_config(
    # Explorer settings
    resource_prefix: Optional[str] = None,
    add_search_roots: Optional[List[str]] = None,
    clear_search_roots: bool = False,
    package: Optional[str] = None,
    follow_symlinks: Optional[bool] = None,
    max_depth: Optional[int] = None,
    encoding: Optional[str] = None,
    # CLI settings
    cli_verbose: Optional[bool] = None,
    cli_color: Optional[bool] = None,
) -> BundleFSConfig:
    """
    Update configuration.

    Only updates provided values, leaving others unchanged.

    Returns:
        The saved configuration
    """
    config = load_config()

    if resource_prefix is not None:
        config.explorer.resource_prefix = resource_prefix
    if clear_search_roots:
        config.explorer.search_roots = []
    if add_search_roots:
        for root in add_search_roots:
            if root not in config.explorer.search_roots:
                config.explorer.search_roots.append(root)
    if package is not None:
        config.explorer.package = package or None
    if follow_symlinks is not None:
        config.explorer.follow_symlinks = follow_symlinks
    if max_depth is not None:
        config.explorer.max_depth = max_depth if max_depth > 0 else None
    if encoding is not None:
        config.explorer.encoding = encoding

    if cli_verbose is not None:
        config.cli.verbose = cli_verbose
    if cli_color is not None:
        config.cli.color = cli_color

    save_config(config)
    return config
