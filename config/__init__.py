"""
Configuration loading utilities for TIERARB.

arbitrage.yaml holds the construction-time configuration (tokens, the
two fee tiers, controller, venue addresses) plus optional `rpc_urls`,
`holder` and `paper:` sections used by the CLI.

Environment (.env is loaded via python-dotenv):
    TIERARB_CONTROLLER  overrides `controller`
    ALCHEMY_API_KEY     substituted into rpc_urls by chains.providers
                        when `price --live` reads them
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from core.exceptions import ConfigError, ValidationError
from core.models import ArbitrageConfig, Token
from core.validators import validate_decimals

CONFIG_DIR = Path(__file__).parent
DEFAULT_CONFIG = "arbitrage.yaml"

CONTROLLER_ENV = "TIERARB_CONTROLLER"

REQUIRED_KEYS = (
    "token_in",
    "token_out",
    "fee_tier_a",
    "fee_tier_b",
    "controller",
    "swap_router",
    "pool_registry",
)


def load_yaml(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of file in config directory

    Returns:
        Parsed YAML as dict
    """
    filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_arbitrage_settings(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Raw arbitrage settings with env and explicit overrides applied.

    Precedence: overrides > TIERARB_CONTROLLER > file.
    """
    load_dotenv()

    if path is None:
        data = load_yaml(DEFAULT_CONFIG)
    else:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}", details={"path": str(path)})
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}", details={"path": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping", details={"type": type(data).__name__})

    controller = os.getenv(CONTROLLER_ENV)
    if controller:
        data["controller"] = controller

    if overrides:
        data.update(overrides)

    return data


def _parse_token(raw: Any, field_name: str) -> Token:
    if isinstance(raw, str):
        raw = {"address": raw}
    if not isinstance(raw, dict) or "address" not in raw:
        raise ConfigError(f"{field_name} must have an address", details={"field": field_name})

    return Token(
        address=raw["address"],
        symbol=str(raw.get("symbol", "")),
        decimals=validate_decimals(raw.get("decimals", 18), f"{field_name}.decimals"),
    )


def load_arbitrage_config(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ArbitrageConfig:
    """
    Load settings and build the immutable ArbitrageConfig.

    Args:
        path: YAML file (default: config/arbitrage.yaml)
        overrides: Top-level keys replacing file values

    Raises:
        ConfigError: missing file, missing keys or invalid values
    """
    return build_arbitrage_config(load_arbitrage_settings(path, overrides))


def build_arbitrage_config(data: Dict[str, Any]) -> ArbitrageConfig:
    """ArbitrageConfig from already-loaded settings."""
    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise ConfigError(f"Missing config keys: {', '.join(missing)}", details={"missing": missing})

    try:
        return ArbitrageConfig(
            token_in=_parse_token(data["token_in"], "token_in"),
            token_out=_parse_token(data["token_out"], "token_out"),
            fee_tier_a=data["fee_tier_a"],
            fee_tier_b=data["fee_tier_b"],
            controller=data["controller"],
            swap_router=data["swap_router"],
            pool_registry=data["pool_registry"],
            chain_id=int(data.get("chain_id", 0)),
        )
    except ValidationError as e:
        raise ConfigError(e.message, details=e.details) from e


def configured_rpc_urls(settings: Dict[str, Any]) -> List[str]:
    """
    The `rpc_urls` list from loaded settings, unresolved.

    Raises:
        ConfigError: key missing, empty or not a list of strings
    """
    urls = settings.get("rpc_urls")
    if not urls or not isinstance(urls, list) or not all(isinstance(u, str) for u in urls):
        raise ConfigError(
            "rpc_urls must be a non-empty list of URLs",
            details={"rpc_urls": repr(urls)},
        )
    return urls
