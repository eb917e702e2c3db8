# survival/models/choice.py
from sqlalchemy import Column, Integer

from ..db import Base


class Choice(Base):
    __tablename__ = "choices"

    # 順位（1 が最優先）がそのまま主キー
    rank = Column(Integer, primary_key=True, autoincrement=False)
    points = Column(Integer, nullable=False)
