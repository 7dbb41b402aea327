"""Group routes."""

from fastapi import APIRouter

from core.dependencies import ChannelManagerDep, GroupManagerDep
from schemas.group import CreateGroupRequest, GroupInfo

router = APIRouter(prefix="/api/groups", tags=["Group"])


@router.post("", response_model=GroupInfo, summary="Create or get a group")
def create_group(
    req: CreateGroupRequest,
    channel_manager: ChannelManagerDep,
    group_manager: GroupManagerDep,
) -> GroupInfo:
    """Register a LINE group under an active channel.

    Calling this again for the same channel and LINE group returns the
    existing group.

    Raises:
        ChannelNotFoundError: If the channel is absent or inactive (404).
    """
    channel = channel_manager.get_channel(req.channel_id, active_only=True)
    group = group_manager.ensure_group(channel.id, req.line_group_id, req.name)
    return GroupInfo.model_validate(group)


@router.get("/{group_id}", response_model=GroupInfo, summary="Get a group")
def get_group(group_id: int, group_manager: GroupManagerDep) -> GroupInfo:
    return GroupInfo.model_validate(group_manager.get_group(group_id))
