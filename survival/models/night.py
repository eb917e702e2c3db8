# survival/models/night.py
from enum import IntEnum

from sqlalchemy import Column, Integer
from sqlalchemy.orm import relationship

from ..db import Base


class NightStatus(IntEnum):
    NOT_STARTED = 0
    CURRENT = 1
    ENDED = 2


STATUS_DESCRIPTIONS = {
    NightStatus.NOT_STARTED: "Not Started",
    NightStatus.CURRENT: "Current",
    NightStatus.ENDED: "Ended",
}


class Night(Base):
    __tablename__ = "nights"

    # 夜番号そのものを主キーにする（1 始まり、連番は API 側で採番）
    id = Column(Integer, primary_key=True, autoincrement=False)
    status = Column(Integer, nullable=False, default=NightStatus.NOT_STARTED)

    votes = relationship("Vote", back_populates="night")
    manual_votes = relationship("ManualVote", back_populates="night")

    @property
    def status_desc(self) -> str:
        try:
            return STATUS_DESCRIPTIONS[NightStatus(self.status)]
        except ValueError:
            return "Unknown"
