"""Channel routes: self-service registration and admin management."""

from typing import List

from fastapi import APIRouter, status

from api.routes.auth import CurrentAdmin
from core.dependencies import ChannelManagerDep
from schemas.channel import ChannelInfo, RegisterChannelRequest, UpdateChannelRequest

router = APIRouter(tags=["Channel"])


@router.post(
    "/api/channels/register",
    response_model=ChannelInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Register a channel with an access key",
)
def register_channel(
    req: RegisterChannelRequest,
    channel_manager: ChannelManagerDep,
) -> ChannelInfo:
    """Register a new channel by redeeming a single-use access key.

    Args:
        req: Access key plus the LINE channel credentials and LIFF ID.
        channel_manager: Injected ChannelManager instance.

    Returns:
        The created channel, without its secrets.

    Raises:
        AccessKeyRejectedError: If the key is unknown, used or expired (403).
    """
    channel = channel_manager.register_channel(
        access_key=req.access_key,
        name=req.name,
        line_channel_id=req.line_channel_id,
        line_channel_access_token=req.line_channel_access_token,
        line_channel_secret=req.line_channel_secret,
        liff_id=req.liff_id,
    )
    return ChannelInfo.model_validate(channel)


@router.get("/api/admin/channels", response_model=List[ChannelInfo], summary="List channels")
def list_channels(
    channel_manager: ChannelManagerDep,
    current_admin: CurrentAdmin,
) -> List[ChannelInfo]:
    return [ChannelInfo.model_validate(c) for c in channel_manager.list_channels()]


@router.get(
    "/api/admin/channels/{channel_id}",
    response_model=ChannelInfo,
    summary="Get a channel",
)
def get_channel(
    channel_id: int,
    channel_manager: ChannelManagerDep,
    current_admin: CurrentAdmin,
) -> ChannelInfo:
    return ChannelInfo.model_validate(channel_manager.get_channel(channel_id))


@router.patch(
    "/api/admin/channels/{channel_id}",
    response_model=ChannelInfo,
    summary="Update a channel",
)
def update_channel(
    channel_id: int,
    req: UpdateChannelRequest,
    channel_manager: ChannelManagerDep,
    current_admin: CurrentAdmin,
) -> ChannelInfo:
    """Update channel fields or deactivate the channel.

    Only the fields present in the body are written. Channels are never
    deleted; send ``isActive: false`` to take one out of service.
    """
    channel = channel_manager.update_channel(
        channel_id, req.model_dump(exclude_unset=True)
    )
    return ChannelInfo.model_validate(channel)
