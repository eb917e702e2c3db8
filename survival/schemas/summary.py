# survival/schemas/summary.py

from pydantic import BaseModel
from typing import Optional

from .vote import VoteOut


class PlayerSummaryOut(BaseModel):
    """1 プレイヤー × 1 夜の集計結果"""
    id: int
    died_on: Optional[int] = None
    today: int
    manual: int
    no_votes: int
    choices: dict[int, int]
    players: int
    total: int
    votes: list[VoteOut]


class TotalSummaryOut(BaseModel):
    """各指標の上位3件（重複・0 は除外）"""
    today: list[int]
    manual: list[int]
    no_votes: list[int]
    choices: dict[int, list[int]]
    players: list[int]
    total: list[int]


class NightSummaryOut(BaseModel):
    summary: dict[str, PlayerSummaryOut]
    total: TotalSummaryOut
    dead: list[str]
