"""Configuration loading with file and environment precedence.

The configuration is read once, at startup, into a frozen
:class:`~cdnheaders.models.CachePolicyConfig`. Sources, from lowest to
highest precedence:

1. **Defaults** -- the field defaults on the model.
2. **Config file** -- the first of: an explicit path, ``$CDN_HEADERS_CONFIG``,
   or ``cdn-headers.yaml`` / ``cdn-headers.yml`` / ``cdn-headers.json`` in the
   working directory. YAML and JSON share the same schema.
3. **Environment** -- the ``CDN_HEADERS_*`` and ``CLOUDFLARE_*`` variables in
   :data:`ENV_OVERRIDES`.

Example ``cdn-headers.yaml``::

    default_duration: 3600
    routes:
      products.show: 7200
      products.*: 3600
    patterns:
      /feeds/*: 600
    excluded_routes:
      - admin.*
    stale_while_revalidate: 86400
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import yaml
from pydantic import ValidationError

from cdnheaders.exceptions import ConfigError
from cdnheaders.models import CachePolicyConfig

CONFIG_ENV_VAR = "CDN_HEADERS_CONFIG"
DEFAULT_CONFIG_FILENAMES = ("cdn-headers.yaml", "cdn-headers.yml", "cdn-headers.json")

_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


# --- Value coercion ---


def parse_bool(value: str, name: str = "value") -> bool:
    """Parse an environment string as a boolean.

    Raises:
        ConfigError: If *value* is not one of the recognised spellings.
    """
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"Expected a boolean for {name}, got: {value!r}")


def parse_int(value: str, name: str = "value") -> int:
    """Parse an environment string as an integer.

    Raises:
        ConfigError: If *value* is not an integer.
    """
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigError(f"Expected an integer for {name}, got: {value!r}") from None


def _parse_optional_int(value: str, name: str) -> Optional[int]:
    if value.strip().lower() in ("", "null", "none"):
        return None
    return parse_int(value, name)


def _parse_str(value: str, name: str) -> str:
    return value


ENV_OVERRIDES: dict[str, tuple[tuple[str, ...], Callable[[str, str], Any]]] = {
    "CDN_HEADERS_ENABLED": (("enabled",), parse_bool),
    "CDN_HEADERS_SKIP_AUTH": (("skip_authenticated",), parse_bool),
    "CDN_HEADERS_REMOVE_COOKIES": (("remove_cookies",), parse_bool),
    "CDN_HEADERS_REMOVE_VARY_COOKIE": (("remove_vary_cookie",), parse_bool),
    "CDN_HEADERS_REMOVE_CSRF": (("remove_csrf_tokens",), parse_bool),
    "CDN_HEADERS_INJECT_CSRF_LOADER": (("inject_csrf_loader",), parse_bool),
    "CDN_HEADERS_LOGGING": (("logging",), parse_bool),
    "CDN_HEADERS_DEFAULT_DURATION": (("default_duration",), parse_int),
    "CDN_HEADERS_SURROGATE": (("surrogate_control",), parse_bool),
    "CDN_HEADERS_SWR": (("stale_while_revalidate",), _parse_optional_int),
    "CDN_HEADERS_SIE": (("stale_if_error",), _parse_optional_int),
    "CDN_HEADERS_CSRF_ENDPOINT": (("csrf_endpoint",), _parse_str),
    "CDN_HEADERS_CSRF_NAMESPACE": (("csrf_namespace",), _parse_str),
    "CDN_HEADERS_CSRF_LOADER_AUTO": (("csrf_loader_routes", "auto"), parse_bool),
    "CLOUDFLARE_ZONE_ID": (("cloudflare", "zone_id"), _parse_str),
    "CLOUDFLARE_API_TOKEN": (("cloudflare", "api_token"), _parse_str),
}
"""Environment variable -> (config key path, parser)."""


# --- Config file ---


def find_config_file(
    path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """Locate the config file to load, or ``None`` to use defaults only.

    Raises:
        ConfigError: If an explicitly requested file does not exist.
    """
    env = os.environ if environ is None else environ

    explicit = path if path is not None else env.get(CONFIG_ENV_VAR) or None
    if explicit is not None:
        candidate = Path(explicit).expanduser()
        if not candidate.is_file():
            raise ConfigError(f"Config file not found: {candidate}")
        return candidate

    for name in DEFAULT_CONFIG_FILENAMES:
        candidate = Path.cwd() / name
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path) -> dict[str, Any]:
    """Parse a YAML or JSON config file into a plain dict.

    Raises:
        ConfigError: If the file cannot be read, does not parse, or is not a
            mapping at the top level.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file {path}: top level must be a mapping")
    return data


# --- Environment ---


def apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """Return a copy of *data* with every set variable from :data:`ENV_OVERRIDES` applied."""
    result = dict(data)
    for var, (keys, parser) in ENV_OVERRIDES.items():
        raw = environ.get(var)
        if raw is None:
            continue
        value = parser(raw, var)

        target = result
        for key in keys[:-1]:
            nested = target.get(key)
            target[key] = dict(nested) if isinstance(nested, dict) else {}
            target = target[key]
        target[keys[-1]] = value
    return result


# --- Entry point ---


def load_config(
    path: Optional[str | Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CachePolicyConfig:
    """Build the effective configuration.

    Args:
        path: Explicit config file path (highest file precedence).
        environ: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        A frozen :class:`~cdnheaders.models.CachePolicyConfig`.

    Raises:
        ConfigError: On unreadable files, unparsable values, or validation
            failures.
    """
    env = os.environ if environ is None else environ

    data: dict[str, Any] = {}
    config_path = find_config_file(path, env)
    if config_path is not None:
        data = load_config_file(config_path)

    data = apply_env_overrides(data, env)

    try:
        return CachePolicyConfig.model_validate(data)
    except ValidationError as exc:
        source = str(config_path) if config_path else "environment"
        raise ConfigError(f"Invalid configuration ({source}): {exc}") from exc
