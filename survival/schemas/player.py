# survival/schemas/player.py

from pydantic import BaseModel
from typing import Optional

from ..models.player import Player


class PlayerCreate(BaseModel):
    """POST /api/player 用（id は Discord の ID）"""
    id: int
    name: Optional[str] = None


class PlayerUpdate(BaseModel):
    """PATCH /api/player/{player_id} 用"""
    name: str


class PlayerOut(BaseModel):
    """レスポンス用"""
    id: int
    name: str
    total_votes: int
    total_manual_votes: int
    died_on: Optional[int] = None


class PlayerResponse(BaseModel):
    player: PlayerOut


class PlayersResponse(BaseModel):
    count: int
    players: list[PlayerOut]


def player_to_out(player: Player) -> PlayerOut:
    """
    total_votes は有効票（is_active）のポイントだけを全夜分合計する。
    手動ポイントは別枠で total_manual_votes に入れる。
    """
    return PlayerOut(
        id=player.discord_id,
        name=player.name,
        total_votes=sum(v.choice.points for v in player.votes_for if v.is_active),
        total_manual_votes=sum(m.points for m in player.manual_votes),
        died_on=player.died_on,
    )
