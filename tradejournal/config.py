"""
Configuration loading and validation for the trade journal.

Configuration objects are plain frozen dataclasses built from a YAML file.
Validation is a set of explicit checks on the raw dictionary, run before any
object is constructed, so errors point at the offending key.
"""

import yaml
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Literal, Dict, Any, Optional, Type, cast

from tradejournal.timeframe import Timeframe

__all__ = ["load_config", "Config"]

OUTPUT_FORMATS = ("json", "markdown", "csv")


# §1. Nested Configuration Dataclasses
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class RunConfig:
    name: str
    output_dir: Path


@dataclass(frozen=True)
class AccountConfig:
    name: str
    initial_balance: float
    current_balance: Optional[float] = None


@dataclass(frozen=True)
class DashboardConfig:
    timeframe: Literal["7d", "30d", "90d", "all"]
    as_of: Optional[date] = None


@dataclass(frozen=True)
class JournalConfig:
    reconcile_pnl_sign: bool = False


@dataclass(frozen=True)
class ReportingConfig:
    output_formats: List[Literal["json", "markdown", "csv"]]


# §2. Top-Level Configuration
# --------------------------------------------------------------------------------------


@dataclass(frozen=True)
class Config:
    """The root configuration object, composing all nested sections."""
    run: RunConfig
    account: AccountConfig
    dashboard: DashboardConfig
    journal: JournalConfig
    reporting: ReportingConfig


# §3. Validation and Loading
# --------------------------------------------------------------------------------------


def _from_dict(data_class: Type[Any], data: Any) -> Any:
    """Recursively creates nested dataclasses from a dictionary."""
    if isinstance(data, dict):
        field_types = {f.name: f.type for f in data_class.__dataclass_fields__.values()}

        kwargs = {}
        for k, v in data.items():
            field_type = field_types.get(k)
            # Unknown keys are passed through; the dataclass constructor
            # rejects them with a TypeError, which load_config reports.
            kwargs[k] = _from_dict(field_type, v) if field_type else v
        return data_class(**kwargs)

    if isinstance(data, str) and data_class in (date, Optional[date]):
        return date.fromisoformat(data)
    if isinstance(data, str) and data_class is Path:
        return Path(data)
    return data


def _validate_config(cfg: Dict[str, Any]) -> None:
    """
    Performs simple, explicit validation checks on the raw config dictionary.
    Fail fast on any logical inconsistencies.
    """
    if not isinstance(cfg, dict):
        raise ValueError("Configuration must be a YAML object.")

    for name in ("run", "account", "dashboard", "journal", "reporting"):
        section = cfg.get(name)
        if section is not None and not isinstance(section, dict):
            raise ValueError(f"{name} must be a mapping")

    account = cfg.get("account") or {}
    initial_balance = account.get("initial_balance")
    if not isinstance(initial_balance, (int, float)) or initial_balance <= 0:
        raise ValueError("account.initial_balance must be positive")

    timeframe = (cfg.get("dashboard") or {}).get("timeframe")
    allowed = [t.value for t in Timeframe]
    if timeframe not in allowed:
        raise ValueError(f"dashboard.timeframe must be one of {allowed}")

    formats = (cfg.get("reporting") or {}).get("output_formats") or []
    unknown = [f for f in formats if f not in OUTPUT_FORMATS]
    if unknown:
        raise ValueError(f"reporting.output_formats contains unknown formats: {unknown}")


# impure
def load_config(config_path: Path) -> Config:
    """
    Loads and validates a YAML configuration file into a Config object.
    #impure: Reads from the filesystem.
    """
    if not config_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in {config_path}: {e}") from e

    _validate_config(raw_config)

    try:
        # _from_dict is too dynamic for mypy to track the return type.
        return cast(Config, _from_dict(Config, raw_config))
    except (TypeError, KeyError) as e:
        raise ValueError(f"Configuration validation failed: missing or invalid key. Details: {e}") from e
