# survival/api/v1/players.py

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session, selectinload
from typing import Optional
import logging

from ... import errors
from ...api.deps import (
    get_current_night,
    get_db_dep,
    get_night_or_404,
    get_player_or_404,
)
from ...models.night import Night
from ...models.player import Player
from ...models.vote import ManualVote, Vote
from ...schemas.player import (
    PlayerCreate,
    PlayerResponse,
    PlayersResponse,
    PlayerUpdate,
    player_to_out,
)
from ...schemas.summary import PlayerSummaryOut
from ...services.ranked_votes import retract_vote
from ...services.scoring import build_player_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/player", tags=["players"])


@router.get(
    "",
    response_model=PlayersResponse,
    response_model_exclude_none=True,
)
def list_players(
    db: Session = Depends(get_db_dep),
):
    players = (
        db.query(Player)
        .options(
            selectinload(Player.votes_for).selectinload(Vote.choice),
            selectinload(Player.manual_votes),
        )
        .all()
    )
    return PlayersResponse(
        count=len(players),
        players=[player_to_out(p) for p in players],
    )


@router.post(
    "",
    response_model=PlayerResponse,
    status_code=201,
    response_model_exclude_none=True,
)
def add_player(
    data: PlayerCreate,
    db: Session = Depends(get_db_dep),
):
    """プレイヤー新規登録（id は Discord の ID）"""
    if data.name is None:
        raise errors.missing_parameter("name")

    exists = (
        db.query(Player)
        .filter(Player.discord_id == data.id)
        .one_or_none()
    )
    if exists is not None:
        raise errors.duplicate_player_id(data.id)

    player = Player(discord_id=data.id, name=data.name, died_on=None)
    db.add(player)
    db.commit()
    db.refresh(player)
    logger.info("player added id=%s name=%s", player.discord_id, player.name)
    return PlayerResponse(player=player_to_out(player))


@router.get(
    "/{player_id:int}",
    response_model=PlayerResponse,
    response_model_exclude_none=True,
)
def get_player(
    player_id: int,
    db: Session = Depends(get_db_dep),
):
    player = get_player_or_404(db, player_id)
    return PlayerResponse(player=player_to_out(player))


@router.delete(
    "/{player_id:int}",
    response_model=PlayerResponse,
    response_model_exclude_none=True,
)
def delete_player(
    player_id: int,
    db: Session = Depends(get_db_dep),
):
    """
    物理削除。投票・被投票・手動ポイントもまとめて消える。
    レスポンスは削除前のプレイヤー情報。
    """
    player = get_player_or_404(db, player_id)
    out = player_to_out(player)

    # ★ 他プレイヤーからこのプレイヤーへの票は取り消し扱いにして、下位の順位を繰り上げる
    for vote in list(player.votes_for):
        retract_vote(db, night=vote.night, by_player=vote.by_player, for_player=player)
    db.flush()
    db.expire_all()

    db.delete(player)
    db.commit()
    logger.info("player deleted id=%s", player_id)
    return PlayerResponse(player=out)


@router.patch("/{player_id:int}", status_code=204)
def patch_player(
    player_id: int,
    data: PlayerUpdate,
    db: Session = Depends(get_db_dep),
):
    player = get_player_or_404(db, player_id)
    player.name = data.name
    db.add(player)
    db.commit()
    return Response(status_code=204)


@router.get(
    "/{player_id:int}/summary",
    response_model=PlayerSummaryOut,
    response_model_exclude_none=True,
)
def player_summary(
    player_id: int,
    night: Optional[int] = None,
    db: Session = Depends(get_db_dep),
):
    """
    1 プレイヤーの夜ごとの集計。
    night を省略した場合は現在の夜を使う。
    """
    player = get_player_or_404(db, player_id)
    target = get_current_night(db) if night is None else get_night_or_404(db, night)

    nights = db.query(Night).all()
    votes = (
        db.query(Vote)
        .options(
            selectinload(Vote.choice),
            selectinload(Vote.by_player),
            selectinload(Vote.for_player),
        )
        .filter((Vote.for_player_id == player.id) | (Vote.by_player_id == player.id))
        .all()
    )
    manual_votes = (
        db.query(ManualVote)
        .filter(
            ManualVote.for_player_id == player.id,
            ManualVote.night_id == target.id,
        )
        .all()
    )

    return build_player_summary(player, target, votes, manual_votes, nights)


# -----------------------------
# 💀 死亡／復活
# -----------------------------
@router.post(
    "/{player_id:int}/kill",
    response_model=PlayerResponse,
    response_model_exclude_none=True,
)
def kill_player(
    player_id: int,
    db: Session = Depends(get_db_dep),
):
    """現在の夜に死亡したことにする"""
    player = get_player_or_404(db, player_id)
    night = get_current_night(db)

    player.died_on = night.id
    db.add(player)
    db.commit()
    db.refresh(player)
    logger.info("player killed id=%s night=%s", player.discord_id, night.id)
    return PlayerResponse(player=player_to_out(player))


@router.post(
    "/{player_id:int}/revive",
    response_model=PlayerResponse,
    response_model_exclude_none=True,
)
def revive_player(
    player_id: int,
    db: Session = Depends(get_db_dep),
):
    player = get_player_or_404(db, player_id)

    player.died_on = None
    db.add(player)
    db.commit()
    db.refresh(player)
    logger.info("player revived id=%s", player.discord_id)
    return PlayerResponse(player=player_to_out(player))
