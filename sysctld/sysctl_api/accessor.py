"""
Read-only access to the host's sysctl values.

Each backend exposes ``read_string`` and ``read_int64`` and maps OS failures
to the exceptions below; the HTTP layer turns those into 404 responses. The
string form of every exception is the bare failure reason (for example
``no such file or directory``).
"""

from __future__ import annotations

import ctypes
import errno as errno_codes
import logging
import os
import sys
from ctypes import byref, c_int, c_int32, c_int64, c_size_t, c_uint, c_uint32, c_uint64
from pathlib import Path
from typing import Any, List, Optional

from sysctld.config import default_config

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

LIBC_PLATFORMS = ("darwin", "freebsd", "netbsd", "dragonfly")

# sysctl(3) internals shared by FreeBSD and macOS.
CTL_MAXNAME = 24
CTL_SYSCTL_NAME2OID = [0, 3]
CTL_SYSCTL_OIDFMT = [0, 4]
OIDFMT_BUFSIZE = 1024
CTLTYPE = 0xF
CTLTYPE_NODE = 1
CTLTYPE_INT = 2
CTLTYPE_STRING = 3
CTLTYPE_S64 = 4
CTLTYPE_UINT = 6
CTLTYPE_LONG = 7
CTLTYPE_ULONG = 8
CTLTYPE_U64 = 9
CTLTYPE_S32 = 0xE
CTLTYPE_U32 = 0xF
SIGNED_KINDS = frozenset({CTLTYPE_INT, CTLTYPE_S64, CTLTYPE_LONG, CTLTYPE_S32})
UNSIGNED_KINDS = frozenset({CTLTYPE_UINT, CTLTYPE_ULONG, CTLTYPE_U64, CTLTYPE_U32})
INTEGER_CTYPES = {4: (c_int32, c_uint32), 8: (c_int64, c_uint64)}


class SysctlError(Exception):
    """Base exception for sysctl read failures."""

    def __init__(
        self,
        message: str,
        *,
        name: Optional[str] = None,
        errno: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.name = name
        self.errno = errno


class SysctlNotFoundError(SysctlError):
    """Raised when no sysctl exists under the requested name."""


class SysctlTypeError(SysctlError):
    """Raised when the sysctl exists but is not of the requested kind."""


class SysctlUnsupportedError(SysctlError):
    """Raised when the platform offers no sysctl facility."""


def _reason(err: Optional[int]) -> str:
    if not err:
        return "unknown error"
    text = os.strerror(err)
    return text[:1].lower() + text[1:]


def _os_error(name: str, err: Optional[int]) -> SysctlError:
    if err in (errno_codes.ENOENT, errno_codes.ENOTDIR):
        return SysctlNotFoundError(_reason(errno_codes.ENOENT), name=name, errno=err)
    return SysctlError(_reason(err), name=name, errno=err)


def _check_int64(name: str, value: int) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise SysctlTypeError("value out of range for int64", name=name)
    return value


class LibcSysctlAccessor:
    """
    sysctlbyname(3) reader for BSD-family kernels and macOS.

    The sysctl's declared type is looked up first (name-to-OID, then the OID
    format), so a string is never decoded as an integer or the reverse.
    Integer sysctls may be 32 or 64 bits wide; the width is taken from the
    size the kernel reports.
    """

    def __init__(self, libc: Optional[ctypes.CDLL] = None) -> None:
        self._libc = libc if libc is not None else ctypes.CDLL(None, use_errno=True)
        self._libc.sysctlbyname.argtypes = [
            ctypes.c_char_p,
            ctypes.c_void_p,
            ctypes.POINTER(c_size_t),
            ctypes.c_void_p,
            c_size_t,
        ]
        self._libc.sysctlbyname.restype = c_int
        self._libc.sysctl.argtypes = [
            ctypes.POINTER(c_int),
            c_uint,
            ctypes.c_void_p,
            ctypes.POINTER(c_size_t),
            ctypes.c_void_p,
            c_size_t,
        ]
        self._libc.sysctl.restype = c_int

    @staticmethod
    def _check_name(name: str) -> None:
        if "\x00" in name:
            raise SysctlNotFoundError(_reason(errno_codes.ENOENT), name=name, errno=errno_codes.ENOENT)

    def _sysctlbyname(self, name: str, buf: Any, size: c_size_t) -> None:
        self._check_name(name)
        target = byref(buf) if buf is not None else None
        result = self._libc.sysctlbyname(name.encode(), target, byref(size), None, 0)
        if result != 0:
            raise _os_error(name, ctypes.get_errno())

    def _sysctl(self, name: str, mib: List[int], buf: Any, size: c_size_t, new: Optional[bytes] = None) -> None:
        query = (c_int * len(mib))(*mib)
        result = self._libc.sysctl(query, len(mib), buf, byref(size), new, len(new) if new else 0)
        if result != 0:
            raise _os_error(name, ctypes.get_errno())

    def _oid_of(self, name: str) -> List[int]:
        self._check_name(name)
        oid = (c_int * CTL_MAXNAME)()
        size = c_size_t(ctypes.sizeof(oid))
        self._sysctl(name, CTL_SYSCTL_NAME2OID, oid, size, name.encode())
        return list(oid[: size.value // ctypes.sizeof(c_int)])

    def _kind_of(self, name: str) -> int:
        oid = self._oid_of(name)
        buf = ctypes.create_string_buffer(OIDFMT_BUFSIZE)
        size = c_size_t(OIDFMT_BUFSIZE)
        self._sysctl(name, CTL_SYSCTL_OIDFMT + oid, buf, size)
        if size.value < ctypes.sizeof(c_uint):
            raise SysctlError("sysctl format unavailable", name=name)
        return c_uint.from_buffer_copy(buf.raw[: ctypes.sizeof(c_uint)]).value & CTLTYPE

    def _size_of(self, name: str) -> int:
        size = c_size_t(0)
        self._sysctlbyname(name, None, size)
        return size.value

    def read_string(self, name: str) -> str:
        if self._kind_of(name) != CTLTYPE_STRING:
            raise SysctlTypeError("sysctl is not a string", name=name)
        size = c_size_t(self._size_of(name))
        buf = ctypes.create_string_buffer(size.value or 1)
        self._sysctlbyname(name, buf, size)
        return buf.raw[: size.value].rstrip(b"\x00").decode("utf-8", errors="replace")

    def read_int64(self, name: str) -> int:
        kind = self._kind_of(name)
        if kind not in SIGNED_KINDS and kind not in UNSIGNED_KINDS:
            raise SysctlTypeError("sysctl is not an integer", name=name)
        width = self._size_of(name)
        if width not in INTEGER_CTYPES:
            raise SysctlTypeError(f"value is {width} bytes wide, not an integer", name=name)
        signed, unsigned = INTEGER_CTYPES[width]
        value = unsigned() if kind in UNSIGNED_KINDS else signed()
        size = c_size_t(width)
        self._sysctlbyname(name, value, size)
        return _check_int64(name, value.value)


class ProcfsSysctlAccessor:
    """Linux reader mapping ``a.b.c`` to ``<root>/a/b/c``."""

    def __init__(self, root: str | os.PathLike[str] = default_config.procfs_root) -> None:
        self._root = Path(root)

    def _path(self, name: str) -> Path:
        parts = name.split(".")
        if not name or "\x00" in name or any(part in ("", "..") or "/" in part for part in parts):
            raise SysctlNotFoundError(_reason(errno_codes.ENOENT), name=name, errno=errno_codes.ENOENT)
        return self._root.joinpath(*parts)

    def _read(self, name: str) -> str:
        path = self._path(name)
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except IsADirectoryError:
            raise SysctlTypeError("sysctl is a tree, not a value", name=name) from None
        except OSError as exc:
            raise _os_error(name, exc.errno) from exc

    def read_string(self, name: str) -> str:
        content = self._read(name)
        return content[:-1] if content.endswith("\n") else content

    def read_int64(self, name: str) -> int:
        tokens = self._read(name).split()
        if len(tokens) != 1:
            raise SysctlTypeError("value is not a single integer", name=name)
        try:
            parsed = int(tokens[0])
        except ValueError:
            raise SysctlTypeError("value is not an integer", name=name) from None
        return _check_int64(name, parsed)


class UnsupportedSysctlAccessor:
    """Placeholder for platforms without a sysctl facility."""

    def __init__(self, platform: str) -> None:
        self.platform = platform

    def _fail(self, name: str) -> SysctlUnsupportedError:
        return SysctlUnsupportedError(f"sysctl is not supported on {self.platform}", name=name)

    def read_string(self, name: str) -> str:
        raise self._fail(name)

    def read_int64(self, name: str) -> int:
        raise self._fail(name)


def select_accessor(platform: str = sys.platform):
    """Return the accessor backend for ``platform``."""
    if platform.startswith("linux"):
        return ProcfsSysctlAccessor(default_config.procfs_root)
    if platform.startswith(LIBC_PLATFORMS):
        try:
            return LibcSysctlAccessor()
        except (OSError, AttributeError):
            logger.warning("sysctlbyname unavailable on %s", platform)
    return UnsupportedSysctlAccessor(platform)


default_accessor = select_accessor()
