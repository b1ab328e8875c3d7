"""Runtime/framework pairings under test."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Pairing:
    """One runtime + framework combination bound to a port and a server script."""

    name: str
    port: int
    runtime: str
    framework: str
    script: str

    @property
    def url(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def slug(self) -> str:
        """Logger-safe identifier, e.g. ``express_on_node_js``."""
        return re.sub(r"[^a-z0-9]+", "_", self.name.lower()).strip("_")


DEFAULT_PAIRINGS: tuple[Pairing, ...] = (
    Pairing("Express on Node.js", 3000, "node", "express", "express_server.js"),
    Pairing("Express on Bun", 3000, "bun", "express", "express_server.js"),
    Pairing("Fastify on Node.js", 3001, "node", "fastify", "fastify_server.js"),
    Pairing("Fastify on Bun", 3001, "bun", "fastify", "fastify_server.js"),
    Pairing("Hono on Node.js", 3002, "node", "hono", "hono_server.js"),
    Pairing("Hono on Bun", 3002, "bun", "hono", "hono_server.js"),
)
