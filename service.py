from __future__ import annotations

import logging
from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from drill_game import DrillSession, Operator, Problem, ProblemGenerator, evaluate, format_expression
from drill_game import config
from drill_game.session import streak_color
from drill_game.store import JsonFileStore

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title="Arithmetic Drill Service")
generator = ProblemGenerator(seed=config.SEED)


@lru_cache(maxsize=1)
def get_session() -> DrillSession:
    return DrillSession(ProblemGenerator(seed=config.SEED), JsonFileStore(config.STATE_PATH))


class GenerateRequest(BaseModel):
    level: int = Field(ge=1, le=20)
    n: int = Field(default=1, ge=1, le=100)


class EvaluateRequest(BaseModel):
    terms: List[int]
    operators: List[Operator]


class EvaluateResponse(BaseModel):
    value: int
    expression: str


class ChoiceResponse(BaseModel):
    id: str
    value: int
    disabled: bool = False


class ProblemResponse(BaseModel):
    level: int
    terms: List[int]
    operators: List[Operator]
    expression: str
    result: int
    choices: List[ChoiceResponse]
    hasTimer: bool
    timerSeconds: int


class SessionResponse(BaseModel):
    level: int
    streak: int
    streakColor: str
    locked: bool
    feedback: str | None
    problem: ProblemResponse


class OutcomeResponse(SessionResponse):
    accepted: bool
    correct: bool
    leveledUp: bool


class LevelRequest(BaseModel):
    level: int = Field(ge=1, le=20)


class ChoiceRequest(BaseModel):
    choice_id: str


class AnswerRequest(BaseModel):
    value: int


def _problem_response(p: Problem, disabled: frozenset[str] = frozenset()) -> ProblemResponse:
    return ProblemResponse(
        level=p.level,
        terms=list(p.terms),
        operators=list(p.operators),
        expression=p.expression,
        result=p.result,
        choices=[
            ChoiceResponse(id=c.id, value=c.value, disabled=c.id in disabled)
            for c in p.choices
        ],
        hasTimer=p.has_timer,
        timerSeconds=p.timer_seconds,
    )


def _session_response(session: DrillSession) -> SessionResponse:
    return SessionResponse(
        level=session.level,
        streak=session.streak,
        streakColor=streak_color(session.streak),
        locked=session.locked,
        feedback=session.feedback,
        problem=_problem_response(session.problem, session.disabled_ids),
    )


def _outcome_response(session: DrillSession, outcome) -> OutcomeResponse:
    return OutcomeResponse(
        **_session_response(session).model_dump(),
        accepted=outcome.accepted,
        correct=outcome.correct,
        leveledUp=outcome.leveled_up,
    )


@app.post("/generate", response_model=List[ProblemResponse])
def generate_problems(body: GenerateRequest) -> List[ProblemResponse]:
    problems = generator.generate_batch(level=body.level, n=body.n, unique=False)
    return [_problem_response(p) for p in problems]


@app.post("/evaluate", response_model=EvaluateResponse)
def evaluate_expression(body: EvaluateRequest) -> EvaluateResponse:
    try:
        value = evaluate(body.terms, body.operators)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return EvaluateResponse(value=value, expression=format_expression(body.terms, body.operators))


@app.get("/session", response_model=SessionResponse)
def read_session(session: DrillSession = Depends(get_session)) -> SessionResponse:
    return _session_response(session)


@app.put("/session/level", response_model=SessionResponse)
def select_level(body: LevelRequest, session: DrillSession = Depends(get_session)) -> SessionResponse:
    session.select_level(body.level)
    return _session_response(session)


@app.post("/session/next", response_model=SessionResponse)
def next_problem(session: DrillSession = Depends(get_session)) -> SessionResponse:
    session.next_problem()
    return _session_response(session)


@app.post("/session/choice", response_model=OutcomeResponse)
def submit_choice(body: ChoiceRequest, session: DrillSession = Depends(get_session)) -> OutcomeResponse:
    return _outcome_response(session, session.submit_choice(body.choice_id))


@app.post("/session/answer", response_model=OutcomeResponse)
def submit_answer(body: AnswerRequest, session: DrillSession = Depends(get_session)) -> OutcomeResponse:
    return _outcome_response(session, session.submit_answer(body.value))


@app.post("/session/timeout", response_model=OutcomeResponse)
def expire_timer(session: DrillSession = Depends(get_session)) -> OutcomeResponse:
    return _outcome_response(session, session.expire_timer())


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
