"""Rank Ladder Routes: ranks, ladder order and rank requirements."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.api.deps import require_user
from tkd_core.infrastructure.database import get_db
from tkd_core.schemas.rank import (
    NextRankResponse, RankCreate, RankResponse,
    RequirementCreate, RequirementResponse,
)
from tkd_core.services.rank_ladder import RankLadder

router = APIRouter(
    prefix="/api/v1/ranks", tags=["ranks"], dependencies=[Depends(require_user)],
)


@router.post("", response_model=RankResponse, status_code=status.HTTP_201_CREATED)
async def create_rank(body: RankCreate, db: AsyncSession = Depends(get_db)):
    ladder = RankLadder(db)
    rank_id = await ladder.add_rank(body.name, body.predecessor, body.successor)
    return RankResponse.model_validate(await ladder.get_rank(rank_id))


@router.get("", response_model=list[RankResponse])
async def list_ladder(db: AsyncSession = Depends(get_db)):
    """All ranks, first to last."""
    return [RankResponse.model_validate(r) for r in await RankLadder(db).ladder()]


@router.get("/{rank_id}", response_model=RankResponse)
async def get_rank(rank_id: int, db: AsyncSession = Depends(get_db)):
    return RankResponse.model_validate(await RankLadder(db).get_rank(rank_id))


@router.get("/{rank_id}/next", response_model=NextRankResponse)
async def get_next_rank(rank_id: int, db: AsyncSession = Depends(get_db)):
    next_rank_id = await RankLadder(db).next_rank(rank_id)
    return NextRankResponse(rank_id=rank_id, next_rank_id=next_rank_id)


@router.delete("/{rank_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rank(rank_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a rank. Requirements, promotions and persons at the rank cascade."""
    await RankLadder(db).delete_rank(rank_id)


@router.post(
    "/{rank_id}/requirements", response_model=RequirementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_requirement(
    rank_id: int, body: RequirementCreate, db: AsyncSession = Depends(get_db),
):
    ladder = RankLadder(db)
    requirement_id = await ladder.add_requirement(
        rank_id, body.name, body.level_needed, body.time_required,
    )
    requirements = await ladder.requirements_for(rank_id)
    created = next(r for r in requirements if r.id == requirement_id)
    return RequirementResponse.model_validate(created)


@router.get("/{rank_id}/requirements", response_model=list[RequirementResponse])
async def list_requirements(rank_id: int, db: AsyncSession = Depends(get_db)):
    requirements = await RankLadder(db).requirements_for(rank_id)
    return [RequirementResponse.model_validate(r) for r in requirements]
