"""Minimal sanity checks for the sysctl resolvers on this host."""

from __future__ import annotations

import os
import sys

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from sysctld.resolver import Kind, ValueResolver  # noqa: E402
from sysctld.response import build_response, rfc1123_now  # noqa: E402

# BSD-style defaults; override via env on Linux (e.g. kernel.hostname / kernel.pid_max).
SAMPLE_STRING = os.getenv("SYSCTLD_SAMPLE_STRING", "kern.hostname")
SAMPLE_INTEGER = os.getenv("SYSCTLD_SAMPLE_INTEGER", "hw.ncpu")


def main() -> None:
    for kind, name in ((Kind.STRING, SAMPLE_STRING), (Kind.INTEGER, SAMPLE_INTEGER)):
        resolver = ValueResolver(kind)
        body, status = build_response(name, rfc1123_now(), resolver.resolve(name), kind)
        print(f"{kind.value} {name} -> {status}:", body.to_dict())


if __name__ == "__main__":
    main()
