# survival/models/vote.py
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..db import Base


class Vote(Base):
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    is_active = Column(Boolean, nullable=False, default=False)

    # (by_player, night) ごとに 1..k の連番になる。DB ではなく ranked_votes 側で保証する
    choice_rank = Column(Integer, ForeignKey("choices.rank"), nullable=False)
    night_id = Column(Integer, ForeignKey("nights.id"), nullable=False, index=True)
    by_player_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    for_player_id = Column(Integer, ForeignKey("players.id"), nullable=False)

    choice = relationship("Choice")
    night = relationship("Night", back_populates="votes")
    by_player = relationship("Player", foreign_keys=[by_player_id], back_populates="votes_by")
    for_player = relationship("Player", foreign_keys=[for_player_id], back_populates="votes_for")


class ManualVote(Base):
    __tablename__ = "manual_votes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    points = Column(Integer, nullable=False)
    description = Column(String, nullable=False, default="")

    night_id = Column(Integer, ForeignKey("nights.id"), nullable=False, index=True)
    for_player_id = Column(Integer, ForeignKey("players.id"), nullable=False)

    night = relationship("Night", back_populates="manual_votes")
    for_player = relationship("Player", back_populates="manual_votes")
