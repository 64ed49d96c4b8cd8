"""Expose the public methods of a service as MCP tools.

Only methods that :func:`~servios.visibility.list_public_methods` reports
are registered; private and unmarked methods stay internal.

Examples
--------
.. code-block:: python

   from fastmcp import FastMCP
   from servios.server.tools import register_public_tools

   server = FastMCP("users")
   register_public_tools(server, UserService(...), prefix="users")
"""

import logging
from typing import Any, List, Optional

from fastmcp import FastMCP

from ..visibility import VisibilityRegistry, list_public_methods, visibility_registry

logger = logging.getLogger(__name__)


def tool_name(method_name: str, prefix: Optional[str] = None) -> str:
    return f"{prefix}_{method_name}" if prefix else method_name


def register_public_tools(
    server: FastMCP,
    service: Any,
    prefix: Optional[str] = None,
    registry: VisibilityRegistry = visibility_registry,
) -> List[str]:
    """Register every public method of ``service`` as a tool on ``server``.

    :param server: FastMCP server instance
    :param service: Service instance whose bound methods become tools
    :param prefix: Optional prefix for tool names, joined with ``_``
    :param registry: Visibility registry to consult
    :return: Names of the registered tools
    """
    registered: List[str] = []
    for method_name in list_public_methods(service, registry):
        method = getattr(service, method_name)
        name = tool_name(method_name, prefix)
        description = (method.__doc__ or "").strip() or None
        server.tool(method, name=name, description=description)
        registered.append(name)

    logger.info(
        f"Registered {len(registered)} public tool(s) for "
        f"{type(service).__name__}: {registered}"
    )
    return registered
