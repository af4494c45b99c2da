"""FastAPI application serving sysctl values over HTTP."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from sysctld.config import SysctldConfig, default_config
from sysctld.cors import cors_wrapper
from sysctld.resolver import Kind, ValueResolver, translate_name
from sysctld.response import build_response, render, rfc1123_now

logger = logging.getLogger(__name__)

STRING_PREFIX = "/sysctl/string/"
INTEGER_PREFIX = "/sysctl/integer/"
HEALTH_STATUS = {"status": "ok"}
APP_VERSION = "0.1.0"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in ("sysctl", "kind", "request_id", "error"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload)


def configure_logging(config: SysctldConfig = default_config) -> None:
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    if config.log_format.lower() == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(level=level)


configure_logging()

string_resolver = ValueResolver(Kind.STRING)
integer_resolver = ValueResolver(Kind.INTEGER)

app = FastAPI(
    title="sysctld",
    description="Read-only sysctl values as JSON.",
    version=APP_VERSION,
)
app.middleware("http")(cors_wrapper(default_config.cors_allowed_origins))


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


async def _serve(resolver: ValueResolver, path: str, request: Request) -> Response:
    request_id = getattr(request.state, "request_id", None)
    name = translate_name(path)
    timestamp = rfc1123_now()
    resolution = await asyncio.to_thread(resolver.resolve, name)
    result, status_code = build_response(name, timestamp, resolution, resolver.kind, request_id=request_id)
    return render(result, status_code)


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get(STRING_PREFIX + "{path:path}")
async def sysctl_string(path: str, request: Request) -> Response:
    """Serve a string sysctl, e.g. /sysctl/string/kern/hostname."""
    return await _serve(string_resolver, path, request)


@app.get(INTEGER_PREFIX + "{path:path}")
async def sysctl_integer(path: str, request: Request) -> Response:
    """Serve a 64-bit integer sysctl, e.g. /sysctl/integer/hw/ncpu."""
    return await _serve(integer_resolver, path, request)


# Run with: sysctld --address :8080
