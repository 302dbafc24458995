"""Relayer identities and addresses, derived from pool configuration."""

import re

RELAYER_ID_PREFIX = "oz-relayer-"
HEALTH_PATH = "/health"

_ORDINAL_RE = re.compile(r"-(\d+)$")


def relayer_ids(count: int) -> list[str]:
    """Identities for a pool of ``count`` relayers, in ordinal order."""
    return [f"{RELAYER_ID_PREFIX}{i}" for i in range(count)]


def relayer_base_url(relayer_id: str, port: int, dns_suffix: str | None = None) -> str:
    """Base URL of a relayer, e.g. ``http://oz-relayer-0:3000``."""
    return f"http://{relayer_id}{dns_suffix or ''}:{port}"


def relayer_health_url(
    relayer_id: str, port: int, dns_suffix: str | None = None
) -> str:
    return relayer_base_url(relayer_id, port, dns_suffix) + HEALTH_PATH


def ordinal_sort_key(relayer_id: str) -> tuple[int, str]:
    """Sort ``oz-relayer-10`` after ``oz-relayer-9``; unknown ids go last."""
    match = _ORDINAL_RE.search(relayer_id)
    if match is None:
        return (1 << 31, relayer_id)
    return (int(match.group(1)), relayer_id)
