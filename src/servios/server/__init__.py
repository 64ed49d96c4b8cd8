"""Hosting integration for public service methods."""

from .tools import register_public_tools, tool_name

__all__ = ["register_public_tools", "tool_name"]
