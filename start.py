#!/usr/bin/env python3
"""
Startup wrapper for the Industry Interview API with IPv4/IPv6 auto-detection.

Binds to dual-stack (::) when available, falling back to IPv4-only (0.0.0.0).

Supports environment variables:
- BIND_ADDRESS: Bind address, or "auto" to detect (default: settings.host)
- PORT: HTTP port (default: settings.port)
"""

import asyncio
import os
import socket
import sys

import uvicorn

from industry_interview.config import get_settings

APP = "industry_interview.main:app"


def can_bind_ipv6_dualstack(port: int) -> bool:
    """Test if we can bind to IPv6 with dual-stack support on the given port."""
    try:
        sock = socket.socket(socket.AF_INET6, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
        except (AttributeError, OSError):
            sock.close()
            return False
        sock.bind(("::", port))
        sock.close()
        return True
    except OSError:
        return False


async def serve_dualstack(port: int, log_level: str) -> None:
    """Serve on a pre-bound [::] socket with IPV6_V6ONLY=0."""
    sock = socket.socket(socket.AF_INET6, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, 0)
    sock.bind(("::", port))
    sock.listen(128)
    sock.setblocking(False)

    server = uvicorn.Server(uvicorn.Config(APP, log_level=log_level))
    await server.serve(sockets=[sock])


def main() -> None:
    """Start uvicorn with auto-detected or explicit bind address."""
    settings = get_settings()
    port = int(os.getenv("PORT", str(settings.port)))
    bind_address = os.getenv("BIND_ADDRESS", settings.host)
    log_level = settings.log_level.lower()

    if bind_address == "auto":
        host = "::" if can_bind_ipv6_dualstack(port) else "0.0.0.0"
    else:
        host = bind_address
    print(f"Binding to {host}:{port}", file=sys.stderr)

    if host == "::":
        asyncio.run(serve_dualstack(port, log_level))
    else:
        uvicorn.run(APP, host=host, port=port, log_level=log_level)


if __name__ == "__main__":
    main()
