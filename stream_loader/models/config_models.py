from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

"""Configuration dataclass for the file -> streaming ingestion loader.

The loader produces exactly one ``LoaderConfig`` per run. It is frozen and is
passed explicitly into the parsing, submission and confirmation steps.
"""

__all__ = [
    "LoaderConfig",
]


@dataclass(frozen=True)
class LoaderConfig:
    """Resolved loader configuration.

    ``properties`` holds every key/value pair read from the source (after
    ``private_key`` resolution and the scheme/port override) in source order.
    Connection and identity parameters are forwarded verbatim from it.
    """
    columns: tuple[str, ...]  # Ordered column names, positional mapping target
    delimiter: str = ","  # Literal field separator (no quoting/escaping)
    debug: bool = False
    encoding: str = "utf-8"  # Input data file encoding
    private_key: str | None = None  # Single-line base64 PKCS8 payload
    properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only view, callers cannot mutate the loaded properties
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.properties.get(key, default)
