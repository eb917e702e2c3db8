# survival/api/v1/nights.py

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session, selectinload
from typing import Optional
import logging

from ...api.deps import get_current_night, get_db_dep, get_night_or_404
from ...models.night import Night, NightStatus
from ...models.player import Player
from ...models.vote import ManualVote, Vote
from ...schemas.night import (
    NightPlayersResponse,
    NightResponse,
    NightsResponse,
    night_players_response,
    night_to_out,
)
from ...schemas.player import player_to_out
from ...schemas.summary import NightSummaryOut
from ...services.scoring import build_night_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/night", tags=["nights"])


def _players_query(db: Session):
    return db.query(Player).options(
        selectinload(Player.votes_for).selectinload(Vote.choice),
        selectinload(Player.manual_votes),
    )


def _night_players(players: list[Player], night: Night) -> NightPlayersResponse:
    alive = [player_to_out(p) for p in players if p.alive_on(night.id)]
    dead = [player_to_out(p) for p in players if not p.alive_on(night.id)]
    return night_players_response(night.id, alive, dead)


# -----------------------------
# 夜の取得
# -----------------------------
@router.get("", response_model=NightsResponse)
def list_nights(
    status: Optional[int] = None,
    db: Session = Depends(get_db_dep),
):
    q = db.query(Night)
    if status is not None:
        q = q.filter(Night.status == status)
    nights = q.order_by(Night.id.asc()).all()
    return NightsResponse(nights=[night_to_out(n) for n in nights])


@router.get("/current", response_model=NightResponse)
def get_current(
    db: Session = Depends(get_db_dep),
):
    night = get_current_night(db)
    return NightResponse(night=night_to_out(night))


@router.get("/{night_id:int}", response_model=NightResponse)
def get_night(
    night_id: int,
    db: Session = Depends(get_db_dep),
):
    night = get_night_or_404(db, night_id)
    return NightResponse(night=night_to_out(night))


# -----------------------------
# 🌙 夜を進める／戻す
# -----------------------------
@router.post("/next", response_model=NightResponse)
def next_night(
    response: Response,
    db: Session = Depends(get_db_dep),
):
    """
    現在の夜を終了にして、次の夜を現在にする。
    - 現在の夜が無ければ 1 夜目から
    - 次の夜の行が無ければ作成して 201
    """
    current = (
        db.query(Night)
        .filter(Night.status == NightStatus.CURRENT)
        .first()
    )

    next_id = 1
    if current is not None:
        current.status = NightStatus.ENDED
        db.add(current)
        next_id = current.id + 1

    night = db.get(Night, next_id)
    if night is None:
        night = Night(id=next_id, status=NightStatus.CURRENT)
        db.add(night)
        response.status_code = 201
    else:
        night.status = NightStatus.CURRENT
        db.add(night)

    db.commit()
    db.refresh(night)
    logger.info("night advanced to %s", night.id)
    return NightResponse(night=night_to_out(night))


@router.post("/prev", response_model=NightResponse)
def prev_night(
    db: Session = Depends(get_db_dep),
):
    """
    現在の夜を未開始に戻し、1 つ前の夜を現在にする。
    1 つ前が無ければ 204（現在の夜なし状態になる）。
    """
    night = get_current_night(db)
    night.status = NightStatus.NOT_STARTED
    db.add(night)

    prev = db.get(Night, night.id - 1)
    if prev is None:
        db.commit()
        logger.info("night %s rewound, no current night", night.id)
        return Response(status_code=204)

    prev.status = NightStatus.CURRENT
    db.add(prev)
    db.commit()
    db.refresh(prev)
    logger.info("night rewound to %s", prev.id)
    return NightResponse(night=night_to_out(prev))


# -----------------------------
# その夜の生存者／死亡者
# -----------------------------
@router.get(
    "/current/players",
    response_model=NightPlayersResponse,
    response_model_exclude_none=True,
)
def get_current_players(
    db: Session = Depends(get_db_dep),
):
    """
    現在の夜の一覧。
    その夜に死亡したプレイヤーは対象外（died_on > night のみ）。
    """
    night = get_current_night(db)
    players = (
        _players_query(db)
        .filter((Player.died_on == None) | (Player.died_on > night.id))  # noqa: E711
        .all()
    )
    return _night_players(players, night)


@router.get(
    "/{night_id:int}/players",
    response_model=NightPlayersResponse,
    response_model_exclude_none=True,
)
def get_players(
    night_id: int,
    db: Session = Depends(get_db_dep),
):
    night = get_night_or_404(db, night_id)
    players = _players_query(db).all()
    return _night_players(players, night)


# -----------------------------
# 🧮 夜の集計
# -----------------------------
@router.get(
    "/{night_id:int}/summary",
    response_model=NightSummaryOut,
    response_model_exclude_none=True,
)
def get_summary(
    night_id: int,
    db: Session = Depends(get_db_dep),
):
    night = get_night_or_404(db, night_id)

    nights = db.query(Night).all()
    votes = (
        db.query(Vote)
        .options(
            selectinload(Vote.choice),
            selectinload(Vote.by_player),
            selectinload(Vote.for_player),
        )
        .all()
    )
    manual_votes = (
        db.query(ManualVote)
        .filter(ManualVote.night_id == night.id)
        .all()
    )
    players = (
        db.query(Player)
        .filter((Player.died_on == None) | (Player.died_on >= night.id))  # noqa: E711
        .all()
    )

    return build_night_summary(night, players, votes, manual_votes, nights)
