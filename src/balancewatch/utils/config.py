import json
import os
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from balancewatch.utils.units import parse_decimal

DEFAULT_WALLETS_FILE = "./wallets.json"
DEFAULT_RPC_TIMEOUT = 60
DEFAULT_CONNECT_TIMEOUT = 10
DEFAULT_RUN_TIMEOUT = 900


class ConfigError(Exception):
    """Settings or networks file cannot be used; the run must stop."""


class NetworkType(str, Enum):
    EVM = "evm"
    ICON = "icon"
    COSMOS = "cosmos"


@dataclass(frozen=True)
class Wallet:
    address: str
    name: str = ""
    alert: bool = False


@dataclass(frozen=True)
class NetworkConfig:
    type: NetworkType
    rpc: str
    explorer: str
    coin: str
    name: str
    decimals: int
    threshold: Decimal
    wallets: Tuple[Wallet, ...] = ()


@dataclass(frozen=True)
class Settings:
    wallets_file: str = DEFAULT_WALLETS_FILE
    discord_webhook_url: Optional[str] = None
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    rpc_timeout: int = DEFAULT_RPC_TIMEOUT
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT
    run_timeout: int = DEFAULT_RUN_TIMEOUT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None):
        """Build settings from the process environment (or any mapping)."""
        env = os.environ if environ is None else environ
        return cls(
            wallets_file=env.get("WALLETS_FILE") or DEFAULT_WALLETS_FILE,
            discord_webhook_url=env.get("DISCORD_WEBHOOK_URL") or None,
            telegram_bot_token=env.get("TELEGRAM_BOT_TOKEN") or None,
            telegram_chat_id=env.get("TELEGRAM_CHAT_ID") or None,
            rpc_timeout=_int_from_env(env, "RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT),
            connect_timeout=_int_from_env(env, "CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
            run_timeout=_int_from_env(env, "RUN_TIMEOUT", DEFAULT_RUN_TIMEOUT),
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )


def _int_from_env(env, key, default):
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer number of seconds, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{key} must be positive, got {value}")
    return value


def load_networks(path):
    """Read the networks file.

    Both the ``{"info": [...]}`` layout and a bare list of networks are
    accepted. Any problem with the file is a ConfigError.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = json.load(f)
    except OSError as e:
        raise ConfigError(f"cannot read networks file {path}: {e}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"malformed networks file {path}: {e}")

    if isinstance(content, dict):
        content = content.get("info")
    if not isinstance(content, list):
        raise ConfigError(f"networks file {path} must hold a list of networks")

    return [parse_network(entry, index) for index, entry in enumerate(content)]


def parse_network(entry, index=0):
    if not isinstance(entry, dict):
        raise ConfigError(f"network #{index} must be an object")

    label = entry.get("name") or f"#{index}"

    try:
        network_type = NetworkType(str(entry.get("type", "")).lower())
    except ValueError:
        raise ConfigError(f"network {label}: unsupported type {entry.get('type')!r}")

    rpc = entry.get("rpc")
    if not isinstance(rpc, str) or not rpc:
        raise ConfigError(f"network {label}: rpc endpoint is required")

    decimals = entry.get("decimals")
    if isinstance(decimals, bool) or not isinstance(decimals, int) or not 0 <= decimals <= 255:
        raise ConfigError(f"network {label}: decimals must be an integer between 0 and 255")

    try:
        threshold = parse_decimal(entry.get("threshold"))
    except ValueError as e:
        raise ConfigError(f"network {label}: bad threshold, {e}")

    wallets = entry.get("wallets") or []
    if not isinstance(wallets, list):
        raise ConfigError(f"network {label}: wallets must be a list")

    return NetworkConfig(
        type=network_type,
        rpc=rpc,
        explorer=entry.get("explorer", ""),
        coin=entry.get("coin", ""),
        name=entry.get("name", ""),
        decimals=decimals,
        threshold=threshold,
        wallets=tuple(parse_wallet(w, label) for w in wallets),
    )


def parse_wallet(entry, network_label=""):
    if not isinstance(entry, dict) or not isinstance(entry.get("address"), str) or not entry["address"]:
        raise ConfigError(f"network {network_label}: every wallet needs an address")
    return Wallet(
        address=entry["address"],
        name=entry.get("name", ""),
        alert=bool(entry.get("alert", False)),
    )
