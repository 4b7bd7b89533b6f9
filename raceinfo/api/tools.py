"""API endpoints exposing the agent tool surface over HTTP."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import PlainTextResponse

from raceinfo.queries.service import RacesInfo, get_races_info
from raceinfo.tools.registry import TOOL_DEFINITIONS, run_tool

router = APIRouter()


@router.get("/")
async def list_tools():
    """List tool definitions with their input schemas."""
    return TOOL_DEFINITIONS


@router.post("/{name}", response_class=PlainTextResponse)
async def invoke_tool(
    name: str,
    tool_input: Optional[dict[str, Any]] = Body(None),
    info: RacesInfo = Depends(get_races_info),
):
    """Run one tool and return its answer as text."""
    return await run_tool(info, name, tool_input)
