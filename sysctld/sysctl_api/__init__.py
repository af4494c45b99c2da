"""sysctl readers for the host kernel."""

from .accessor import (
    LibcSysctlAccessor,
    ProcfsSysctlAccessor,
    SysctlError,
    SysctlNotFoundError,
    SysctlTypeError,
    SysctlUnsupportedError,
    UnsupportedSysctlAccessor,
    default_accessor,
    select_accessor,
)

__all__ = [
    "SysctlError",
    "SysctlNotFoundError",
    "SysctlTypeError",
    "SysctlUnsupportedError",
    "LibcSysctlAccessor",
    "ProcfsSysctlAccessor",
    "UnsupportedSysctlAccessor",
    "default_accessor",
    "select_accessor",
]
