# survival/models/player.py
from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..db import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # API から見える ID は Discord の ID
    discord_id = Column(BigInteger, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False, unique=True)

    # 死亡した夜（生存中は NULL）
    died_on = Column(Integer, ForeignKey("nights.id"), nullable=True)

    votes_for = relationship(
        "Vote",
        foreign_keys="Vote.for_player_id",
        back_populates="for_player",
        cascade="all",
    )
    votes_by = relationship(
        "Vote",
        foreign_keys="Vote.by_player_id",
        back_populates="by_player",
        cascade="all",
    )
    manual_votes = relationship("ManualVote", back_populates="for_player", cascade="all")

    def alive_on(self, night_id: int) -> bool:
        return self.died_on is None or self.died_on >= night_id
