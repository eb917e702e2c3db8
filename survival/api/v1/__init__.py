# survival/api/v1/__init__.py

from fastapi import APIRouter

from . import choices, nights, players, votes

api_router = APIRouter()

# それぞれの router 側で prefix を持っている前提にする
api_router.include_router(choices.router)  # prefix="/choice"
api_router.include_router(nights.router)   # prefix="/night"
api_router.include_router(players.router)  # prefix="/player"
api_router.include_router(votes.router)    # prefix="/vote"
