########## Engine API ##########
# Lightweight FastAPI server exposing one stage engine to a presentation client.

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from ..core import config
from ..core.curtain import results_payload
from ..core.logs import log_run_event
from ..core.scripts import ScriptConfigError, default_repository
from ..core.session import StageEngine
from ..core.types import EncoreResult, SessionSnapshot, StartFailure

app = FastAPI(title="CrossTalk Engine API", version="0.1.0")
_engine: StageEngine = StageEngine()


class StartRequest(BaseModel):
    """Optional explicit script choice; random when omitted."""

    script_index: Optional[int] = None


class ChoiceRequest(BaseModel):
    """Display text of the option the player picked."""

    option_text: str


@app.get("/scripts")
def scripts() -> List[Dict[str, Any]]:
    """List the script menu."""

    # 1 Report a broken catalogue the same way a failed start is reported.     # steps
    try:
        repository = _engine.repository or default_repository()
    except ScriptConfigError as exc:
        log_run_event(f"script menu unavailable: {exc}")
        raise HTTPException(status_code=503, detail=config.START_FAILURE_MESSAGE) from exc
    return [
        {"index": index, "title": title, "subtitle": subtitle}
        for index, title, subtitle in repository.catalogue()
    ]


@app.get("/session")
def session() -> SessionSnapshot:
    """Expose the current session snapshot."""

    return _engine.snapshot()


@app.post("/session/start")
async def start(request: Optional[StartRequest] = None) -> SessionSnapshot:
    """Start a new show, replacing whatever is on stage."""

    # 1 Surface start failures as 503 so the client can offer a retry.        # steps
    result = await _engine.start_session(request.script_index if request else None)
    if isinstance(result, StartFailure):
        raise HTTPException(status_code=503, detail=result.message)
    return result


@app.post("/session/choice")
async def choice(request: ChoiceRequest) -> SessionSnapshot:
    """Submit the player's response for the current turn."""

    return await _engine.submit_choice(request.option_text)


@app.post("/session/encore")
async def encore() -> EncoreResult:
    """Ask for an encore after a finished show."""

    return await _engine.request_encore()


@app.post("/session/quit")
def quit_session() -> SessionSnapshot:
    """Drop the current show and return to the start screen."""

    return _engine.quit_to_start()


@app.get("/session/results")
def results() -> Dict[str, Any]:
    """Curtain-call verdicts for the current session."""

    snapshot = _engine.snapshot()
    payload = results_payload(snapshot)
    payload["encore_threshold"] = config.ENCORE_THRESHOLD
    return payload
