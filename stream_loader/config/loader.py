from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from collections import Counter
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from dotenv import dotenv_values
from jsonschema.exceptions import ValidationError

from stream_loader.models.config_models import LoaderConfig

"""Configuration loader.

Responsibilities:
- Read key=value properties (python-dotenv) or YAML (``.yml``/``.yaml``)
- Validate the raw mapping against ``config_schema.json``
- Derive delimiter / columns / debug / encoding
- Resolve ``private_key_file`` into a single-line ``private_key``
- Force the transport settings (https on 443)
"""

__all__ = [
    "ConfigError",
    "load_config",
    "read_private_key",
    "dump_properties",
    "SCHEMA_PATH",
]

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

DEFAULT_DELIMITER = ","
DEFAULT_ENCODING = "utf-8"
TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})

# Always injected, user values are overridden
FIXED_TRANSPORT = {"scheme": "https", "port": "443"}

_PEM_ARMOUR = re.compile(r"-----(?:BEGIN|END) [A-Z0-9 ]+-----")

# Java properties escapes: \t \n \r \f \uXXXX, any other \x is x
_ESCAPE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)
_ESCAPE_CHARS = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


class ConfigError(Exception):
    pass


def _normalize_value(value: Any) -> Any:
    # YAML scalars/lists -> the string form a properties file would carry
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return value


def _decode_escapes(value: str) -> str:
    def _replace(m: re.Match) -> str:
        esc = m.group(1)
        if len(esc) == 5:
            return chr(int(esc[1:], 16))
        return _ESCAPE_CHARS.get(esc, esc)

    return _ESCAPE.sub(_replace, value)


def _read_properties(path: Path) -> dict[str, Any]:
    try:
        if path.suffix in (".yml", ".yaml"):
            try:
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"invalid yaml: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")
            return {str(k): _normalize_value(v) for k, v in data.items()}
        # key=value lines, values kept verbatim; a bare key is an empty value
        values = dotenv_values(path, encoding="utf-8", interpolate=False)
        return {k: "" if v is None else v for k, v in values.items()}
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate raw properties against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or data violates the schema
            (e.g. ``'columns' is a required property``)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        where = "/".join(str(p) for p in e.path)
        if where:
            raise ConfigError(f"config validation failed: {where}: {e.message}") from e
        raise ConfigError(f"config validation failed: {e.message}") from e


def _parse_columns(raw: str) -> tuple[str, ...]:
    columns = tuple(c.strip() for c in raw.split(","))
    if any(not c for c in columns):
        raise ConfigError(f"empty column name in 'columns': {raw!r}")
    dupes = sorted(c for c, n in Counter(columns).items() if n > 1)
    if dupes:
        raise ConfigError(f"duplicate column names in 'columns': {', '.join(dupes)}")
    return columns


def _parse_bool(raw: str | None) -> bool:
    if raw is None:
        return False
    return raw.strip().lower() in TRUE_STRINGS


def _validate_rsa_pkcs8(payload: str) -> None:
    try:
        der = base64.b64decode(payload, validate=True)
        key = serialization.load_der_private_key(der, password=None)
    except (binascii.Error, ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ConfigError(f"invalid private key: {e}") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ConfigError(f"private key is not an RSA key: {type(key).__name__}")


def read_private_key(path: Path, *, validate: bool = False) -> str:
    """Read a PEM private key file into a single-line base64 payload.

    Armour lines (``-----BEGIN ...-----`` / ``-----END ...-----``) and all
    whitespace are removed. With ``validate`` the payload must decode to an
    unencrypted PKCS8 RSA key.
    """
    if not path.exists():
        raise ConfigError(f"private key file does not exist: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read private key file {path}: {e}") from e

    payload = "".join(_PEM_ARMOUR.sub("", text).split())
    if not payload:
        raise ConfigError(f"private key file is empty: {path}")

    if validate:
        _validate_rsa_pkcs8(payload)
        logger.info("private key is valid")
    return payload


def load_config(path: Path, *, force_debug: bool = False) -> LoaderConfig:
    """Load and resolve the loader configuration.

    Args:
        path: properties (or YAML) file
        force_debug: treat the run as debug even if the file does not say so

    Raises:
        ConfigError: on any problem; the caller treats it as fatal
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")

    raw = _read_properties(path)
    _validate_config_schema(raw)

    columns = _parse_columns(raw["columns"])
    delimiter = _decode_escapes(raw.get("delimiter") or DEFAULT_DELIMITER)
    encoding = raw.get("encoding") or DEFAULT_ENCODING
    debug = force_debug or _parse_bool(raw.get("debug", raw.get("DEBUG")))

    props: dict[str, str] = dict(raw)
    private_key = None
    key_file = raw.get("private_key_file")
    if key_file:
        private_key = read_private_key(Path(key_file), validate=debug)
        props["private_key"] = private_key
    props.update(FIXED_TRANSPORT)

    return LoaderConfig(
        columns=columns,
        delimiter=delimiter,
        debug=debug,
        encoding=encoding,
        private_key=private_key,
        properties=props,
    )


def dump_properties(cfg: LoaderConfig) -> None:
    """Echo every loaded property at DEBUG level (values are not redacted)."""
    for key, value in cfg.properties.items():
        logger.debug(f"property {key}: {value}")
