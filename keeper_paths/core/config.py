"""Keeper configuration.

``config.json`` at the project root (or the file named by ``KEEPER_CONFIG_PATH``)
is read once at import into ``CONFIG``. Getters below read sections of it lazily
so tests and entry points can swap it with ``set_config``.
"""

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

_CONFIG_ENV_KEYS = ("KEEPER_CONFIG_PATH", "KEEPER_CONFIG")
_DEFAULT_CONFIG_FILENAME = "config.json"
_DEFAULT_FORK_RPC_URL = "http://127.0.0.1:8545"
_DEFAULT_FORK_RPC_PREFIX = "hardhat"


def _project_root() -> Path | None:
    """Nearest directory holding ``pyproject.toml``, from cwd then this file."""
    for start in (Path.cwd(), Path(__file__).parent):
        for directory in (start.resolve(), *start.resolve().parents):
            if (directory / "pyproject.toml").exists():
                return directory
    return None


def _env_config_path() -> str | None:
    for key in _CONFIG_ENV_KEYS:
        value = os.getenv(key, "").strip()
        if value:
            return value
    return None


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()

    root = _project_root()
    configured = Path(_env_config_path() or _DEFAULT_CONFIG_FILENAME).expanduser()
    if configured.is_absolute() or root is None:
        return configured
    return root / configured


def load_config_json(
    path: str | Path | None = None, *, require_exists: bool = False
) -> dict[str, Any]:
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        if require_exists:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {}
    try:
        return json.loads(cfg_path.read_text())
    except json.JSONDecodeError as exc:
        logger.warning(f"Ignoring unreadable config {cfg_path}: {exc}")
        return {}


CONFIG: dict[str, Any] = load_config_json()


def set_config(config: dict[str, Any]) -> None:
    """Replace the global CONFIG dict in-place.

    Modules holding a reference to ``CONFIG`` see the new values.
    """
    CONFIG.clear()
    CONFIG.update(config)


def _section(name: str) -> dict[str, Any]:
    section = CONFIG.get(name)
    return section if isinstance(section, dict) else {}


def set_rpc_urls(rpc_urls: dict[str, Any]) -> None:
    CONFIG.setdefault("strategy", {})["rpc_urls"] = rpc_urls


def get_rpc_urls() -> dict[str, Any]:
    return _section("strategy").get("rpc_urls", {})


def get_zrx_api_key() -> str | None:
    api_key = _section("system").get("zrx_api_key")
    if api_key:
        return str(api_key).strip()
    return os.environ.get("ZRX_API_KEY")


def get_fork_rpc_url() -> str:
    return str(_section("fork").get("rpc_url") or _DEFAULT_FORK_RPC_URL).strip()


def get_fork_rpc_prefix() -> str:
    # anvil answers to both "anvil_*" and "hardhat_*"
    return str(_section("fork").get("rpc_prefix") or _DEFAULT_FORK_RPC_PREFIX).strip()


def get_harvest_config() -> dict[str, Any]:
    return _section("harvest")


def get_yswaps_config() -> dict[str, Any]:
    return _section("yswaps")


def get_wallets() -> list[dict[str, Any]]:
    wallets = CONFIG.get("wallets", [])
    return wallets if isinstance(wallets, list) else []


def find_wallet_by_label(label: str) -> dict[str, Any] | None:
    want = str(label).strip()
    for wallet in get_wallets():
        if isinstance(wallet, dict) and str(wallet.get("label", "")).strip() == want:
            return wallet
    return None
