# SPDX-License-Identifier: MIT
"""
anime-episodes server entrypoint.

Wires FastMCP with all tool modules under anime_episodes/tools/.
"""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from .config import get_settings
# Import tool modules (each provides register_tools(mcp))
from .tools import episodes, info, mappings, meta


def create_app() -> FastMCP:
    mcp = FastMCP("anime-episodes")

    # Register tools from each module
    episodes.register_tools(mcp)
    info.register_tools(mcp)
    mappings.register_tools(mcp)
    meta.register_tools(mcp)

    return mcp


def main() -> None:
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    create_app().run()


if __name__ == "__main__":
    main()
