# survival/api/v1/choices.py

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ... import errors
from ...api.deps import get_db_dep
from ...models.choice import Choice
from ...schemas.choice import (
    ChoiceIn,
    ChoiceResponse,
    ChoicesResponse,
    choice_to_out,
)

router = APIRouter(prefix="/choice", tags=["choices"])


@router.get("", response_model=ChoicesResponse)
def list_choices(
    db: Session = Depends(get_db_dep),
):
    choices = db.query(Choice).order_by(Choice.rank.asc()).all()
    return ChoicesResponse(
        count=len(choices),
        choices=[choice_to_out(c) for c in choices],
    )


@router.get("/{rank:int}", response_model=ChoiceResponse)
def get_choice(
    rank: int,
    db: Session = Depends(get_db_dep),
):
    choice = db.get(Choice, rank)
    if choice is None:
        raise errors.choice_not_found(rank)
    return ChoiceResponse(choice=choice_to_out(choice))


@router.put("", response_model=ChoiceResponse, status_code=201)
def put_choice(
    data: ChoiceIn,
    db: Session = Depends(get_db_dep),
):
    """
    順位ごとのポイントを登録する。
    - 新しい順位なら作成して 201
    - 既存の順位ならポイントだけ更新して 204
    """
    choice = db.get(Choice, data.rank)
    if choice is None:
        choice = Choice(rank=data.rank, points=data.points)
        db.add(choice)
        db.commit()
        db.refresh(choice)
        return ChoiceResponse(choice=choice_to_out(choice))

    choice.points = data.points
    db.add(choice)
    db.commit()
    return Response(status_code=204)
