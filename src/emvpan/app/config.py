"""Runtime settings: JSON config file merged with command line overrides."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from emvpan.app.emv.listener import RetryPolicy
from emvpan.core.emv import TerminalConfig

lg = logging.getLogger(__name__)

# key -> (section, attribute, type)
_KEYS: dict[str, tuple[str, str, type]] = {
    "ttq": ("terminal", "ttq", int),
    "currency_code": ("terminal", "currency_code", int),
    "country_code": ("terminal", "country_code", int),
    "amount": ("terminal", "amount", int),
    "max_failures": ("policy", "max_failures", int),
    "initial_delay": ("policy", "initial_delay", float),
    "max_delay": ("policy", "max_delay", float),
    "poll_timeout": ("settings", "poll_timeout", float),
}

# Keys whose string values are always hex.
_HEX_KEYS: set[str] = {"ttq"}

# key -> (lowest, highest) accepted value; None is unbounded.
_LIMITS: dict[str, tuple[float, float | None]] = {
    "ttq": (0, 0xFFFFFFFF),
    "currency_code": (0, 9999),
    "country_code": (0, 9999),
    "amount": (0, 10**12 - 1),
    "max_failures": (1, None),
    "initial_delay": (0, None),
    "max_delay": (0, None),
    "poll_timeout": (0, None),
}


@dataclass
class Settings:
    terminal: TerminalConfig = field(default_factory=TerminalConfig)
    policy: RetryPolicy = field(default_factory=RetryPolicy)
    poll_timeout: float = 1.0


def parse_int(value: int | str) -> int:
    """Parse an int; strings with 0x prefix or a-f digits are hex."""
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    low = value.strip().lower()
    if low.startswith("0x") or any(c in "abcdef" for c in low):
        return int(low, 16)
    return int(low)


def _convert(key: str, kind: type, value: object) -> int | float:
    try:
        if key in _HEX_KEYS and isinstance(value, str):
            return int(value, 16)
        if kind is int:
            return parse_int(value)  # type: ignore[arg-type]
        if isinstance(value, bool):
            raise ValueError(f"expected a number, got {value!r}")
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid value for {key}: {value!r}") from exc


def _check_range(key: str, value: int | float) -> None:
    low, high = _LIMITS[key]
    if value < low or (high is not None and value > high):
        bound = f"{low}..{high}" if high is not None else f">= {low}"
        raise ValueError(f"{key} out of range ({bound}): {value}")


def load_config(path: str | None = None, **overrides: object) -> Settings:
    """Build Settings from defaults, then *path* (JSON), then *overrides*.

    Overrides set to None are ignored. Unknown keys raise ValueError.
    """
    values: dict[str, object] = {}
    if path is not None:
        with open(path) as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"{path}: expected a JSON object")
        values.update(loaded)
        lg.debug("loaded %d settings from %s", len(loaded), path)
    values.update({k: v for k, v in overrides.items() if v is not None})

    settings = Settings()
    for key, value in values.items():
        if key not in _KEYS:
            raise ValueError(f"unknown setting: {key}")
        section, attr, kind = _KEYS[key]
        target = settings if section == "settings" else getattr(settings, section)
        converted = _convert(key, kind, value)
        _check_range(key, converted)
        setattr(target, attr, converted)
    return settings
