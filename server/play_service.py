"""REST service exposing caller mode and versus-CPU mode to a browser."""

from __future__ import annotations

import argparse
import logging
import uuid
from dataclasses import asdict
from random import Random
from typing import Dict, List, Optional, TypeVar

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from engine.board import ALL_WIN_CONDITIONS, WinCondition
from engine.caller import CallerSession, LoggingAnnouncer, NullAnnouncer
from engine.clock import AsyncioClock
from engine.match import MatchController
from engine.pacing import Difficulty, Speed
from engine.service import CallerService, MatchService

logger = logging.getLogger(__name__)


class CallerStartRequest(BaseModel):
    speed: str = Field(Speed.NORMAL.value, description="slow, normal or fast.")
    voice_enabled: bool = True
    seed: Optional[int] = None


class SpeedRequest(BaseModel):
    speed: str


class JumpRequest(BaseModel):
    card_id: int


class MatchStartRequest(BaseModel):
    difficulty: str = Field(Difficulty.MEDIUM.value, description="easy, medium or hard.")
    win_conditions: Optional[List[str]] = None
    seed: Optional[int] = None


class ConfigureRequest(BaseModel):
    difficulty: Optional[str] = None
    win_conditions: Optional[List[str]] = None


class MarkRequest(BaseModel):
    cell_id: str


caller_sessions: Dict[str, CallerService] = {}
match_sessions: Dict[str, MatchService] = {}


app = FastAPI(title="Lotería Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


S = TypeVar("S")


def ensure_session(store: Dict[str, S], session_id: str) -> S:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def parse_speed(value: str) -> Speed:
    try:
        return Speed(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown speed {value!r}") from None


def parse_difficulty(value: str) -> Difficulty:
    try:
        return Difficulty(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown difficulty {value!r}") from None


def parse_conditions(values: List[str]) -> List[WinCondition]:
    if not values:
        raise HTTPException(status_code=400, detail="At least one win condition is required")
    try:
        return [WinCondition(value) for value in values]
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from None


# Caller mode -----------------------------------------------------------


@app.post("/caller/start")
async def start_caller(request: CallerStartRequest) -> Dict[str, object]:
    session = CallerSession(
        AsyncioClock(),
        speed=parse_speed(request.speed),
        announcer=LoggingAnnouncer() if request.voice_enabled else NullAnnouncer(),
        rng=Random(request.seed),
    )
    service = CallerService(session)
    session_id = uuid.uuid4().hex
    caller_sessions[session_id] = service
    logger.info("Caller session %s started", session_id)
    return {"session_id": session_id, "state": asdict(service.get_view())}


@app.get("/caller/{session_id}")
async def caller_state(session_id: str) -> Dict[str, object]:
    service = ensure_session(caller_sessions, session_id)
    return {"state": asdict(service.get_view())}


@app.delete("/caller/{session_id}")
async def close_caller(session_id: str) -> Dict[str, object]:
    service = ensure_session(caller_sessions, session_id)
    service.close()
    del caller_sessions[session_id]
    logger.info("Caller session %s closed", session_id)
    return {"session_id": session_id, "closed": True}


@app.post("/caller/{session_id}/play")
async def caller_play(session_id: str) -> Dict[str, object]:
    service = ensure_session(caller_sessions, session_id)
    return {"state": asdict(service.play())}


@app.post("/caller/{session_id}/pause")
async def caller_pause(session_id: str) -> Dict[str, object]:
    service = ensure_session(caller_sessions, session_id)
    return {"state": asdict(service.pause())}


@app.post("/caller/{session_id}/next")
async def caller_next(session_id: str) -> Dict[str, object]:
    service = ensure_session(caller_sessions, session_id)
    return {"state": asdict(service.next())}


@app.post("/caller/{session_id}/previous")
async def caller_previous(session_id: str) -> Dict[str, object]:
    service = ensure_session(caller_sessions, session_id)
    return {"state": asdict(service.previous())}


@app.post("/caller/{session_id}/jump")
async def caller_jump(session_id: str, request: JumpRequest) -> Dict[str, object]:
    service = ensure_session(caller_sessions, session_id)
    return {"state": asdict(service.jump_to(request.card_id))}


@app.post("/caller/{session_id}/speed")
async def caller_speed(session_id: str, request: SpeedRequest) -> Dict[str, object]:
    service = ensure_session(caller_sessions, session_id)
    speed = parse_speed(request.speed)
    return {"state": asdict(service.set_speed(speed.value))}


@app.post("/caller/{session_id}/reshuffle")
async def caller_reshuffle(session_id: str) -> Dict[str, object]:
    service = ensure_session(caller_sessions, session_id)
    return {"state": asdict(service.reshuffle())}


# Versus-CPU mode -------------------------------------------------------


@app.post("/match/start")
async def start_match(request: MatchStartRequest) -> Dict[str, object]:
    conditions = (
        parse_conditions(request.win_conditions) if request.win_conditions is not None else ALL_WIN_CONDITIONS
    )
    controller = MatchController(
        AsyncioClock(),
        difficulty=parse_difficulty(request.difficulty),
        win_conditions=conditions,
        rng=Random(request.seed),
    )
    service = MatchService(controller)
    session_id = uuid.uuid4().hex
    match_sessions[session_id] = service
    logger.info("Match session %s started", session_id)
    return {"session_id": session_id, "state": asdict(service.get_view())}


@app.get("/match/{session_id}")
async def match_state(session_id: str) -> Dict[str, object]:
    service = ensure_session(match_sessions, session_id)
    return {"state": asdict(service.get_view())}


@app.delete("/match/{session_id}")
async def close_match(session_id: str) -> Dict[str, object]:
    service = ensure_session(match_sessions, session_id)
    service.close()
    del match_sessions[session_id]
    logger.info("Match session %s closed", session_id)
    return {"session_id": session_id, "closed": True}


@app.post("/match/{session_id}/play")
async def match_play(session_id: str) -> Dict[str, object]:
    service = ensure_session(match_sessions, session_id)
    return {"state": asdict(service.play())}


@app.post("/match/{session_id}/pause")
async def match_pause(session_id: str) -> Dict[str, object]:
    service = ensure_session(match_sessions, session_id)
    return {"state": asdict(service.pause())}


@app.post("/match/{session_id}/mark")
async def match_mark(session_id: str, request: MarkRequest) -> Dict[str, object]:
    service = ensure_session(match_sessions, session_id)
    return {"state": asdict(service.mark(request.cell_id))}


@app.post("/match/{session_id}/rematch")
async def match_rematch(session_id: str) -> Dict[str, object]:
    service = ensure_session(match_sessions, session_id)
    return {"state": asdict(service.rematch())}


@app.post("/match/{session_id}/configure")
async def match_configure(session_id: str, request: ConfigureRequest) -> Dict[str, object]:
    service = ensure_session(match_sessions, session_id)
    difficulty = parse_difficulty(request.difficulty) if request.difficulty is not None else None
    conditions = parse_conditions(request.win_conditions) if request.win_conditions is not None else None
    view = service.configure(
        difficulty=difficulty.value if difficulty is not None else None,
        win_conditions=[condition.value for condition in conditions] if conditions is not None else None,
    )
    return {"state": asdict(view)}


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the Lotería play API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--log-level", default="info")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
