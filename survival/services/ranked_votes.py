# survival/services/ranked_votes.py
"""
順位付き投票の書き込みルール。

(投票者, 夜) ごとに使われている順位が 1..k の連番になるよう保証する。
commit は呼び出し側（ルーター）で行う。
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from .. import errors
from ..models.choice import Choice
from ..models.night import Night
from ..models.player import Player
from ..models.vote import Vote

logger = logging.getLogger(__name__)


def _votes_by(db: Session, night: Night, by_player: Player) -> list[Vote]:
    return (
        db.query(Vote)
        .filter(
            Vote.night_id == night.id,
            Vote.by_player_id == by_player.id,
        )
        .order_by(Vote.choice_rank.asc())
        .all()
    )


def cast_vote(
    db: Session,
    *,
    night: Night,
    by_player: Player,
    for_player: Player,
    choice: Choice,
    is_active: Optional[bool] = None,
) -> tuple[Vote, bool]:
    """
    投票する。戻り値は (vote, 新規作成かどうか)。

    - 同じ相手に別の順位で既に投票している → DuplicateVoteRank
    - その順位に既存票がある → 相手を差し替え（is_active は指定時のみ更新）
    - 新しい順位は「今の最大順位 + 1」でなければ NonSequentialVote
    """
    votes = _votes_by(db, night, by_player)

    other = next(
        (v for v in votes if v.for_player_id == for_player.id and v.choice_rank != choice.rank),
        None,
    )
    if other is not None:
        raise errors.duplicate_vote_rank(
            by_player.discord_id, for_player.discord_id, choice.rank, other.choice_rank
        )

    existing = next((v for v in votes if v.choice_rank == choice.rank), None)
    if existing is not None:
        existing.for_player = for_player
        if is_active is not None:
            existing.is_active = is_active
        db.add(existing)
        logger.info(
            "vote retargeted night=%s by=%s rank=%s for=%s",
            night.id, by_player.discord_id, choice.rank, for_player.discord_id,
        )
        return existing, False

    max_rank = max((v.choice_rank for v in votes), default=0)
    if choice.rank != max_rank + 1:
        raise errors.non_sequential_vote(by_player.discord_id, choice.rank, max_rank)

    vote = Vote(
        night=night,
        choice=choice,
        by_player=by_player,
        for_player=for_player,
        is_active=True if is_active is None else is_active,
    )
    db.add(vote)
    logger.info(
        "vote cast night=%s by=%s rank=%s for=%s",
        night.id, by_player.discord_id, choice.rank, for_player.discord_id,
    )
    return vote, True


def retract_vote(
    db: Session,
    *,
    night: Night,
    by_player: Player,
    for_player: Player,
) -> None:
    """
    投票を取り消し、それより下位の票を 1 つずつ繰り上げて連番を保つ。
    """
    votes = _votes_by(db, night, by_player)

    vote = next((v for v in votes if v.for_player_id == for_player.id), None)
    if vote is None:
        raise errors.vote_not_found(for_player.discord_id, by_player.discord_id, night.id)

    removed_rank = vote.choice_rank
    db.delete(vote)
    db.flush()

    for v in votes:
        if v is not vote and v.choice_rank > removed_rank:
            v.choice_rank -= 1
            db.add(v)

    logger.info(
        "vote retracted night=%s by=%s rank=%s for=%s",
        night.id, by_player.discord_id, removed_rank, for_player.discord_id,
    )
