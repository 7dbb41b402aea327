"""User routes: point balances and lookup by LINE user ID."""

from typing import Optional

from fastapi import APIRouter, Query

from core.dependencies import GroupManagerDep
from core.exceptions import BadRequestError
from schemas.group import PointsResponse, UserInfo

router = APIRouter(prefix="/api/users", tags=["User"])


@router.get("/by-line-id", response_model=Optional[UserInfo], summary="Find a user by LINE ID")
def get_user_by_line_id(
    group_manager: GroupManagerDep,
    line_user_id: Optional[str] = Query(default=None, alias="lineUserId"),
    group_id: Optional[int] = Query(default=None, alias="groupId"),
) -> Optional[UserInfo]:
    """Look up a member of a group by LINE user ID.

    Returns:
        The user, or null if the member has not interacted with the group yet.
    """
    if not line_user_id or group_id is None:
        raise BadRequestError("lineUserId and groupId are required")
    user = group_manager.find_user(line_user_id, group_id)
    return UserInfo.model_validate(user) if user is not None else None


@router.get("/{user_id}/points", response_model=PointsResponse, summary="Get a user's points")
def get_user_points(user_id: int, group_manager: GroupManagerDep) -> PointsResponse:
    return PointsResponse(points=group_manager.get_user(user_id).points)
