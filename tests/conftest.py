import os
import sys

import pytest

# Ensure repository root is on sys.path before importing project modules.
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from fastapi.testclient import TestClient  # noqa: E402

from sysctld.resolver import Kind, ValueResolver  # noqa: E402
from sysctld.sysctl_api import SysctlNotFoundError, SysctlTypeError  # noqa: E402


class StubAccessor:
    """In-memory sysctl table standing in for the OS."""

    def __init__(self, values):
        self.values = dict(values)
        self.calls = []

    def _lookup(self, name):
        self.calls.append(name)
        if name not in self.values:
            raise SysctlNotFoundError("no such file or directory", name=name)
        return self.values[name]

    def read_string(self, name):
        value = self._lookup(name)
        if not isinstance(value, str):
            raise SysctlTypeError("value is not a string", name=name)
        return value

    def read_int64(self, name):
        value = self._lookup(name)
        if not isinstance(value, int):
            raise SysctlTypeError("value is not an integer", name=name)
        return value


@pytest.fixture
def stub_accessor():
    return StubAccessor({"kern.hostname": "host.example", "hw.ncpu": 4, "kern.ostype": "FreeBSD"})


@pytest.fixture
def client(monkeypatch, stub_accessor):
    from sysctld import server as server_mod

    monkeypatch.setattr(server_mod, "string_resolver", ValueResolver(Kind.STRING, accessor=stub_accessor))
    monkeypatch.setattr(server_mod, "integer_resolver", ValueResolver(Kind.INTEGER, accessor=stub_accessor))
    return TestClient(server_mod.app)
