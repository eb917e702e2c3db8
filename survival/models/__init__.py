from .night import Night, NightStatus
from .player import Player
from .choice import Choice
from .vote import Vote, ManualVote

__all__ = [
    "Night",
    "NightStatus",
    "Player",
    "Choice",
    "Vote",
    "ManualVote",
]
