"""Tool-invocation surface for conversational agents."""

from raceinfo.tools.registry import TOOL_DEFINITIONS, TOOL_HANDLERS, run_tool

__all__ = ["TOOL_DEFINITIONS", "TOOL_HANDLERS", "run_tool"]
