# survival/errors.py
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional


class ErrorCode(IntEnum):
    UNKNOWN_ERROR = -1
    NO_ERROR = 0
    CHOICE_NOT_FOUND = 1
    NIGHT_NOT_FOUND = 2
    NO_CURRENT_NIGHT = 3
    PLAYER_NOT_FOUND = 4
    MALFORMED_PARAMETER = 5
    VOTE_NOT_FOUND = 6
    DUPLICATE_VOTE_RANK = 7
    NON_SEQUENTIAL_VOTE = 8
    MANUAL_VOTE_NOT_FOUND = 9
    DUPLICATE_PLAYER_ID = 10
    MISSING_PARAMETER = 11


DESCRIPTIONS = {
    ErrorCode.UNKNOWN_ERROR: "Unknown Error",
    ErrorCode.NO_ERROR: "No Error",
    ErrorCode.CHOICE_NOT_FOUND: "Choice Not Found",
    ErrorCode.NIGHT_NOT_FOUND: "Night Not Found",
    ErrorCode.NO_CURRENT_NIGHT: "No Current Night",
    ErrorCode.PLAYER_NOT_FOUND: "Player Not Found",
    ErrorCode.MALFORMED_PARAMETER: "Malformed Parameter",
    ErrorCode.VOTE_NOT_FOUND: "Vote Not Found",
    ErrorCode.DUPLICATE_VOTE_RANK: "Duplicate Vote Rank",
    ErrorCode.NON_SEQUENTIAL_VOTE: "Non-Sequential Vote",
    ErrorCode.MANUAL_VOTE_NOT_FOUND: "Manual Vote Not Found",
    ErrorCode.DUPLICATE_PLAYER_ID: "Duplicate Player Id",
    ErrorCode.MISSING_PARAMETER: "Missing Parameter",
}


@dataclass(eq=False)
class SurvivalError(Exception):
    """
    API 全体で使う構造化エラー。
    main.py の exception_handler が {"error": {...}} 形式の JSON に変換する。
    """

    code: ErrorCode
    status_code: int = 400
    metadata: Optional[dict[str, Any]] = None

    @property
    def description(self) -> str:
        return DESCRIPTIONS.get(self.code, "Unknown")

    def to_dict(self) -> dict:
        error: dict[str, Any] = {
            "code": int(self.code),
            "description": self.description,
        }
        if self.metadata is not None:
            error["metadata"] = self.metadata
        return {"error": error}

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code.name}: {self.metadata}"


# -----------------------------
# 見つからない系（404）
# -----------------------------
def choice_not_found(choice_id: int) -> SurvivalError:
    return SurvivalError(ErrorCode.CHOICE_NOT_FOUND, 404, {"choice_id": choice_id})


def night_not_found(night_id: int) -> SurvivalError:
    return SurvivalError(ErrorCode.NIGHT_NOT_FOUND, 404, {"night_id": night_id})


def player_not_found(player_id: int) -> SurvivalError:
    return SurvivalError(ErrorCode.PLAYER_NOT_FOUND, 404, {"player_id": player_id})


def vote_not_found(for_id: int, by_id: int, night: int) -> SurvivalError:
    return SurvivalError(
        ErrorCode.VOTE_NOT_FOUND, 404, {"for_id": for_id, "by_id": by_id, "night": night}
    )


def manual_vote_not_found(manual_vote_id: int) -> SurvivalError:
    return SurvivalError(
        ErrorCode.MANUAL_VOTE_NOT_FOUND, 404, {"manual_vote_id": manual_vote_id}
    )


# -----------------------------
# 状態・入力・ルール違反（400 / 409）
# -----------------------------
def no_current_night() -> SurvivalError:
    return SurvivalError(ErrorCode.NO_CURRENT_NIGHT, 400)


def malformed_parameter(parameter: str) -> SurvivalError:
    return SurvivalError(ErrorCode.MALFORMED_PARAMETER, 400, {"parameter": parameter})


def missing_parameter(param_name: str) -> SurvivalError:
    return SurvivalError(ErrorCode.MISSING_PARAMETER, 400, {"param_name": param_name})


def duplicate_vote_rank(by_id: int, for_id: int, choice: int, other_choice: int) -> SurvivalError:
    return SurvivalError(
        ErrorCode.DUPLICATE_VOTE_RANK,
        400,
        {"by_id": by_id, "for_id": for_id, "choice": choice, "other_choice": other_choice},
    )


def non_sequential_vote(by_id: int, rank: int, prev_rank: int) -> SurvivalError:
    return SurvivalError(
        ErrorCode.NON_SEQUENTIAL_VOTE,
        400,
        {"by_id": by_id, "rank": rank, "prev_rank": prev_rank},
    )


def duplicate_player_id(player_id: int) -> SurvivalError:
    return SurvivalError(ErrorCode.DUPLICATE_PLAYER_ID, 409, {"id": player_id})
