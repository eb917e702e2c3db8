# survival/schemas/night.py

from pydantic import BaseModel

from ..models.night import Night
from .player import PlayerOut


class NightOut(BaseModel):
    number: int
    state: int
    status: str


class NightResponse(BaseModel):
    night: NightOut


class NightsResponse(BaseModel):
    nights: list[NightOut]


class NightPlayersPart(BaseModel):
    count: int
    players: list[PlayerOut]


class NightPlayers(BaseModel):
    count: int
    alive: NightPlayersPart
    dead: NightPlayersPart


class NightPlayersResponse(BaseModel):
    """その夜時点の生存者／死亡者一覧"""
    night: int
    players: NightPlayers


def night_to_out(night: Night) -> NightOut:
    return NightOut(number=night.id, state=int(night.status), status=night.status_desc)


def night_players_response(
    night_id: int,
    alive: list[PlayerOut],
    dead: list[PlayerOut],
) -> NightPlayersResponse:
    return NightPlayersResponse(
        night=night_id,
        players=NightPlayers(
            count=len(alive) + len(dead),
            alive=NightPlayersPart(count=len(alive), players=alive),
            dead=NightPlayersPart(count=len(dead), players=dead),
        ),
    )
