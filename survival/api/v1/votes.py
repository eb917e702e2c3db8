# survival/api/v1/votes.py

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session, selectinload
import logging

from ... import errors
from ...api.deps import get_db_dep, get_night_or_404, get_player_or_404
from ...models.choice import Choice
from ...models.vote import ManualVote, Vote
from ...schemas.vote import (
    FullVotesResponse,
    ManualVoteIn,
    ManualVoteResponse,
    ManualVotesResponse,
    ManualVoteUpdate,
    VoteIn,
    VoteResponse,
    VotesResponse,
    manual_vote_to_out,
    manual_votes_response,
    vote_to_out,
    votes_response,
)
from ...services.ranked_votes import cast_vote, retract_vote

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vote", tags=["votes"])


def _night_votes(db: Session, night_id: int) -> list[Vote]:
    return (
        db.query(Vote)
        .options(
            selectinload(Vote.choice),
            selectinload(Vote.by_player),
            selectinload(Vote.for_player),
        )
        .filter(Vote.night_id == night_id)
        .order_by(Vote.by_player_id.asc(), Vote.choice_rank.asc())
        .all()
    )


def _load_all(db: Session, night_id: int, player_id: int):
    """
    by / for / all / manual をまとめて返すヘルパー。
    夜・プレイヤーが無ければ SurvivalError。
    """
    night = get_night_or_404(db, night_id)
    player = get_player_or_404(db, player_id)

    votes = _night_votes(db, night.id)
    manual = (
        db.query(ManualVote)
        .filter(
            ManualVote.night_id == night.id,
            ManualVote.for_player_id == player.id,
        )
        .order_by(ManualVote.id.asc())
        .all()
    )

    by = [vote_to_out(v) for v in votes if v.by_player_id == player.id]
    for_ = [vote_to_out(v) for v in votes if v.for_player_id == player.id]
    all_ = [vote_to_out(v) for v in votes]
    manual_out = [manual_vote_to_out(m) for m in manual]
    return by, for_, all_, manual_out


# -----------------------------
# 📋 投票一覧
# -----------------------------
@router.get("/{night_id:int}/{player_id:int}/by", response_model=VotesResponse)
def get_by(night_id: int, player_id: int, db: Session = Depends(get_db_dep)):
    by, _, _, _ = _load_all(db, night_id, player_id)
    return votes_response(by)


@router.get("/{night_id:int}/{player_id:int}/for", response_model=VotesResponse)
def get_for(night_id: int, player_id: int, db: Session = Depends(get_db_dep)):
    _, for_, _, _ = _load_all(db, night_id, player_id)
    return votes_response(for_)


@router.get("/{night_id:int}/{player_id:int}/manual", response_model=ManualVotesResponse)
def get_manual_for(night_id: int, player_id: int, db: Session = Depends(get_db_dep)):
    _, _, _, manual = _load_all(db, night_id, player_id)
    return manual_votes_response(manual)


@router.get("/{night_id:int}/{player_id:int}/all", response_model=VotesResponse)
def get_all(night_id: int, player_id: int, db: Session = Depends(get_db_dep)):
    _, _, all_, _ = _load_all(db, night_id, player_id)
    return votes_response(all_)


@router.get("/{night_id:int}/{player_id:int}/full", response_model=FullVotesResponse)
def get_full(night_id: int, player_id: int, db: Session = Depends(get_db_dep)):
    _, _, all_, manual = _load_all(db, night_id, player_id)
    return FullVotesResponse(votes=all_, manual_votes=manual)


# -----------------------------
# ✋ 手動ポイント
# -----------------------------
@router.put(
    "/{night_id:int}/{for_id:int}/manual",
    response_model=ManualVoteResponse,
    status_code=201,
)
def manual_vote_for(
    night_id: int,
    for_id: int,
    data: ManualVoteIn,
    db: Session = Depends(get_db_dep),
):
    night = get_night_or_404(db, night_id)
    for_player = get_player_or_404(db, for_id)

    manual_vote = ManualVote(
        night=night,
        for_player=for_player,
        points=data.points,
        description=data.description or "",
    )
    db.add(manual_vote)
    db.commit()
    db.refresh(manual_vote)
    logger.info(
        "manual vote added id=%s night=%s for=%s points=%s",
        manual_vote.id, night.id, for_player.discord_id, manual_vote.points,
    )
    return ManualVoteResponse(manual_vote=manual_vote_to_out(manual_vote))


def _get_manual_or_404(db: Session, manual_vote_id: int) -> ManualVote:
    manual_vote = db.get(ManualVote, manual_vote_id)
    if manual_vote is None:
        raise errors.manual_vote_not_found(manual_vote_id)
    return manual_vote


@router.get("/manual/{manual_vote_id:int}", response_model=ManualVoteResponse)
def get_manual(manual_vote_id: int, db: Session = Depends(get_db_dep)):
    manual_vote = _get_manual_or_404(db, manual_vote_id)
    return ManualVoteResponse(manual_vote=manual_vote_to_out(manual_vote))


@router.delete("/manual/{manual_vote_id:int}", status_code=204)
def unvote_manual(manual_vote_id: int, db: Session = Depends(get_db_dep)):
    manual_vote = _get_manual_or_404(db, manual_vote_id)
    db.delete(manual_vote)
    db.commit()
    return Response(status_code=204)


@router.patch("/manual/{manual_vote_id:int}", status_code=204)
def change_manual(
    manual_vote_id: int,
    data: ManualVoteUpdate,
    db: Session = Depends(get_db_dep),
):
    manual_vote = _get_manual_or_404(db, manual_vote_id)
    if data.points is not None:
        manual_vote.points = data.points
    if data.description is not None:
        manual_vote.description = data.description
    db.add(manual_vote)
    db.commit()
    return Response(status_code=204)


# -----------------------------
# 🗳 順位付き投票
# -----------------------------
@router.get("/{night_id:int}/{by_id:int}/{for_id:int}", response_model=VoteResponse)
def get_vote(
    night_id: int,
    by_id: int,
    for_id: int,
    db: Session = Depends(get_db_dep),
):
    night = get_night_or_404(db, night_id)
    by_player = get_player_or_404(db, by_id)
    for_player = get_player_or_404(db, for_id)

    vote = (
        db.query(Vote)
        .filter(
            Vote.night_id == night.id,
            Vote.by_player_id == by_player.id,
            Vote.for_player_id == for_player.id,
        )
        .first()
    )
    if vote is None:
        raise errors.vote_not_found(for_id, by_id, night.id)

    return VoteResponse(vote=vote_to_out(vote))


@router.put("/{night_id:int}/{by_id:int}/{for_id:int}", response_model=VoteResponse)
def vote_for(
    night_id: int,
    by_id: int,
    for_id: int,
    data: VoteIn,
    response: Response,
    db: Session = Depends(get_db_dep),
):
    """
    投票する。
    - 同じ順位に既存票があれば相手を差し替えて 200
    - 新しい順位なら作成して 201（順位は 1 から連番でなければならない）
    """
    night = get_night_or_404(db, night_id)
    by_player = get_player_or_404(db, by_id)
    for_player = get_player_or_404(db, for_id)

    choice = db.get(Choice, data.choice)
    if choice is None:
        raise errors.choice_not_found(data.choice)

    vote, created = cast_vote(
        db,
        night=night,
        by_player=by_player,
        for_player=for_player,
        choice=choice,
        is_active=data.is_active,
    )
    db.commit()
    db.refresh(vote)

    if created:
        response.status_code = 201
    return VoteResponse(vote=vote_to_out(vote))


@router.delete("/{night_id:int}/{by_id:int}/{for_id:int}", status_code=204)
def unvote(
    night_id: int,
    by_id: int,
    for_id: int,
    db: Session = Depends(get_db_dep),
):
    night = get_night_or_404(db, night_id)
    by_player = get_player_or_404(db, by_id)
    for_player = get_player_or_404(db, for_id)

    retract_vote(db, night=night, by_player=by_player, for_player=for_player)
    db.commit()
    return Response(status_code=204)
