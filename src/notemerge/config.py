"""Configuration loader for notemerge.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CONFIG_NAME = "notemerge.toml"


@dataclass
class VaultConfig:
    """Vault-specific configuration."""
    root: Path


@dataclass
class MergeSettings:
    """Merge behaviour.

    An annotation of None leaves headings and region annotations without
    a prefix.
    """
    file_annotation: str | None = "MERGED FILE"
    region_annotation: str | None = "MERGED REGION"
    auto_save: bool = False
    auto_discard: bool = False
    trash: bool = False
    tab_width: int = 4


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class NotemergeConfig:
    """Complete notemerge configuration."""
    vault: VaultConfig
    merge: MergeSettings
    logging: LoggingConfig


def _annotation(value: Any, default: str) -> str | None:
    # `false` or "" disables the annotation
    if value is None:
        return default
    if value is False or value == "":
        return None
    return str(value)


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> NotemergeConfig:
    """
    Load configuration from notemerge.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/notemerge.toml
    3. vault_path/notemerge.toml

    Args:
        config_path: Explicit path to config file
        vault_path: Vault root path for fallback search

    Returns:
        NotemergeConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if vault_path:
        search_paths.append(vault_path / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    vault_data = toml_data.get("vault", {})
    vault_config = VaultConfig(
        root=Path(vault_data.get("root", vault_path or Path("./notes"))),
    )

    merge_data = toml_data.get("merge", {})
    defaults = MergeSettings()
    merge_settings = MergeSettings(
        file_annotation=_annotation(merge_data.get("file_annotation"), "MERGED FILE"),
        region_annotation=_annotation(merge_data.get("region_annotation"), "MERGED REGION"),
        auto_save=bool(merge_data.get("auto_save", defaults.auto_save)),
        auto_discard=bool(merge_data.get("auto_discard", defaults.auto_discard)),
        trash=bool(merge_data.get("trash", defaults.trash)),
        tab_width=int(merge_data.get("tab_width", defaults.tab_width)),
    )

    logging_data = toml_data.get("logging", {})
    logging_config = LoggingConfig(
        level=str(logging_data.get("level", "WARNING")).upper(),
    )

    return NotemergeConfig(
        vault=vault_config,
        merge=merge_settings,
        logging=logging_config,
    )
