# survival/schemas/choice.py

from pydantic import BaseModel, ConfigDict

from ..models.choice import Choice


class ChoiceIn(BaseModel):
    """PUT /api/choice 用"""
    rank: int
    points: int


class ChoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rank: int
    points: int


class ChoiceResponse(BaseModel):
    choice: ChoiceOut


class ChoicesResponse(BaseModel):
    count: int
    choices: list[ChoiceOut]


def choice_to_out(choice: Choice) -> ChoiceOut:
    return ChoiceOut(rank=choice.rank, points=choice.points)
