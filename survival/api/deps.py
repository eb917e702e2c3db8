# survival/api/deps.py

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from .. import errors
from ..models.night import Night, NightStatus
from ..models.player import Player


def get_db_dep(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI の Depends で使う DB セッション依存関数。
    セッションファクトリは create_app() が app.state に置いたものを使う。
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


# -----------------------------
# よく使う取得処理（見つからなければ SurvivalError）
# -----------------------------
def get_night_or_404(db: Session, night_id: int) -> Night:
    night = db.get(Night, night_id)
    if night is None:
        raise errors.night_not_found(night_id)
    return night


def get_current_night(db: Session) -> Night:
    night = (
        db.query(Night)
        .filter(Night.status == NightStatus.CURRENT)
        .first()
    )
    if night is None:
        raise errors.no_current_night()
    return night


def get_player_or_404(db: Session, discord_id: int) -> Player:
    player = (
        db.query(Player)
        .filter(Player.discord_id == discord_id)
        .one_or_none()
    )
    if player is None:
        raise errors.player_not_found(discord_id)
    return player

