# survival/schemas/vote.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from ..models.vote import ManualVote, Vote


class VoteIn(BaseModel):
    """PUT /api/vote/{night_id}/{by_id}/{for_id} のリクエストボディ"""
    choice: int
    is_active: Optional[bool] = None


class ManualVoteIn(BaseModel):
    """PUT /api/vote/{night_id}/{for_id}/manual のリクエストボディ"""
    points: int
    description: Optional[str] = None


class ManualVoteUpdate(BaseModel):
    points: Optional[int] = None
    description: Optional[str] = None


class VoteOut(BaseModel):
    # "for" は予約語なので for_ で持って、JSON では "for" にする
    model_config = ConfigDict(populate_by_name=True)

    by: int
    for_: int = Field(alias="for")
    by_name: str
    for_name: str
    night: int
    choice: int
    points: int
    is_active: bool


class ManualVoteOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    for_: int = Field(alias="for")
    night: int
    points: int
    description: str


class VoteResponse(BaseModel):
    vote: VoteOut


class VotesResponse(BaseModel):
    count: int
    votes: list[VoteOut]


class ManualVoteResponse(BaseModel):
    manual_vote: ManualVoteOut


class ManualVotesResponse(BaseModel):
    count: int
    manual_votes: list[ManualVoteOut]


class FullVotesResponse(BaseModel):
    votes: list[VoteOut]
    manual_votes: list[ManualVoteOut]


def vote_to_out(vote: Vote) -> VoteOut:
    return VoteOut(
        by=vote.by_player.discord_id,
        for_=vote.for_player.discord_id,
        by_name=vote.by_player.name,
        for_name=vote.for_player.name,
        night=vote.night_id,
        choice=vote.choice.rank,
        points=vote.choice.points,
        is_active=vote.is_active,
    )


def manual_vote_to_out(manual_vote: ManualVote) -> ManualVoteOut:
    return ManualVoteOut(
        id=manual_vote.id,
        for_=manual_vote.for_player.discord_id,
        night=manual_vote.night_id,
        points=manual_vote.points,
        description=manual_vote.description,
    )


def votes_response(votes: list[VoteOut]) -> VotesResponse:
    return VotesResponse(count=len(votes), votes=votes)


def manual_votes_response(manual_votes: list[ManualVoteOut]) -> ManualVotesResponse:
    return ManualVotesResponse(count=len(manual_votes), manual_votes=manual_votes)
