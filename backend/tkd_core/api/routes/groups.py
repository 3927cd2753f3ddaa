"""Group Routes: groups and their memberships."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tkd_core.api.deps import require_user
from tkd_core.infrastructure.database import get_db
from tkd_core.schemas.class_session import (
    GroupCreate, GroupResponse, MembersResponse, MembershipCreate,
)
from tkd_core.services.lookups import require_group
from tkd_core.services.session_registry import GroupSessionRegistry

router = APIRouter(
    prefix="/api/v1/groups", tags=["groups"], dependencies=[Depends(require_user)],
)


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(body: GroupCreate, db: AsyncSession = Depends(get_db)):
    group_id = await GroupSessionRegistry(db).create_group(body.name)
    return GroupResponse.model_validate(await require_group(db, group_id))


@router.get("/{group_id}/members", response_model=MembersResponse)
async def list_members(group_id: int, db: AsyncSession = Depends(get_db)):
    members = await GroupSessionRegistry(db).group_members(group_id)
    return MembersResponse(person_ids=sorted(members))


@router.post(
    "/{group_id}/members", response_model=MembersResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    group_id: int, body: MembershipCreate, db: AsyncSession = Depends(get_db),
):
    registry = GroupSessionRegistry(db)
    await registry.add_member(group_id, body.person_id, body.joined_at)
    return MembersResponse(person_ids=sorted(await registry.group_members(group_id)))


@router.delete("/{group_id}/members/{person_id}", response_model=MembersResponse)
async def remove_member(
    group_id: int, person_id: int, db: AsyncSession = Depends(get_db),
):
    registry = GroupSessionRegistry(db)
    await registry.remove_member(group_id, person_id)
    return MembersResponse(person_ids=sorted(await registry.group_members(group_id)))
