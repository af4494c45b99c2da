"""Kind-specific sysctl resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from sysctld.sysctl_api import SysctlError, default_accessor

logger = logging.getLogger(__name__)

SysctlValue = Union[str, int]


class Kind(str, Enum):
    STRING = "string"
    INTEGER = "integer"


@dataclass(frozen=True, slots=True)
class KindSpec:
    """Zero value and accessor operation bound to a kind."""

    kind: Kind
    zero_value: SysctlValue
    reader: str


KIND_SPECS: Dict[Kind, KindSpec] = {
    Kind.STRING: KindSpec(Kind.STRING, zero_value="", reader="read_string"),
    Kind.INTEGER: KindSpec(Kind.INTEGER, zero_value=0, reader="read_int64"),
}


@dataclass(frozen=True, slots=True)
class Resolution:
    value: Any
    ok: bool
    reason: str = ""


def translate_name(url_path: str) -> str:
    """Turn the URL path below a routing prefix into a dotted sysctl name."""
    return url_path.replace("/", ".")


class ValueResolver:
    """
    Read sysctls of one fixed kind.

    The accessor operation is bound once at construction; ``resolve`` never
    branches on kind.
    """

    def __init__(self, kind: Kind, accessor=default_accessor) -> None:
        self.spec = KIND_SPECS[Kind(kind)]
        self._read = getattr(accessor, self.spec.reader)

    @property
    def kind(self) -> Kind:
        return self.spec.kind

    def resolve(self, name: str) -> Resolution:
        """
        Read ``name`` through the bound accessor.

        Returns:
            A successful Resolution carrying the value, or a failed one whose
            ``reason`` is the accessor's error text.
        """
        try:
            value = self._read(name)
        except SysctlError as exc:
            return Resolution(value=None, ok=False, reason=str(exc))
        except Exception as exc:
            logger.debug("Unexpected error reading sysctl %s", name, exc_info=True)
            return Resolution(value=None, ok=False, reason=str(exc) or type(exc).__name__)
        return Resolution(value=value, ok=True)
