"""Container ports in Dockerfile ``EXPOSE`` instructions, e.g. ``80/tcp``.

ASP.NET Core container images listen on port 8080 instead of 80 from
.NET 8, so an exposed port 80 moves to 8080 when upgrading to .NET 8 or
later. Any other port is left alone.
"""

from __future__ import annotations

import re

from .models import ParseFailure, TokenKind, UpgradeChannel, VersionToken

KIND = TokenKind.CONTAINER_PORT

LEGACY_HTTP_PORT = 80
HTTP_PORT = 8080
NON_ROOT_PORT_MINIMUM = (8, 0)

_PORT_RE = re.compile(r"^(?P<port>[1-9][0-9]*)(?P<protocol>/(?i:tcp|udp))?$")


def parse_port(text: str) -> VersionToken | ParseFailure:
    match = _PORT_RE.match(text)
    if match is None:
        return ParseFailure(text, KIND, "not a container port")
    port = int(match["port"])
    return VersionToken(
        raw=text,
        kind=KIND,
        major=port,
        precision=1,
        suffix=match["protocol"] or "",
        upgradable=port == LEGACY_HTTP_PORT,
    )


def is_at_least(token: VersionToken, channel: UpgradeChannel) -> bool:
    if not token.upgradable:
        return True
    return channel.version < NON_ROOT_PORT_MINIMUM


def format_upgraded(token: VersionToken, channel: UpgradeChannel) -> str:
    if is_at_least(token, channel):
        return token.raw
    return f"{HTTP_PORT}{token.suffix}"
