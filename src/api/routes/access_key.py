"""Access key routes (admin only)."""

from typing import List

from fastapi import APIRouter, status

from api.routes.auth import CurrentAdmin
from core.dependencies import AccessKeyManagerDep
from schemas.access_key import AccessKeyInfo, AccessKeyListItem, GenerateAccessKeyRequest

router = APIRouter(prefix="/api/admin/access-keys", tags=["AccessKey"])


@router.get("", response_model=List[AccessKeyListItem], summary="List access keys")
def list_access_keys(
    access_key_manager: AccessKeyManagerDep,
    current_admin: CurrentAdmin,
) -> List[AccessKeyListItem]:
    """List every access key, newest first, with its creator and channel."""
    results = []
    for model, created_by_username, channel_name in access_key_manager.list_access_keys():
        item = AccessKeyListItem.model_validate(model)
        item.created_by_username = created_by_username
        item.channel_name = channel_name
        results.append(item)
    return results


@router.post(
    "",
    response_model=AccessKeyInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Issue an access key",
)
def generate_access_key(
    access_key_manager: AccessKeyManagerDep,
    current_admin: CurrentAdmin,
    req: GenerateAccessKeyRequest = GenerateAccessKeyRequest(),
) -> AccessKeyInfo:
    """Issue a single-use access key.

    Args:
        access_key_manager: Injected AccessKeyManager instance.
        current_admin: The authenticated admin, recorded as the creator.
        req: Optional body with ``expiresInDays`` (default 7).

    Returns:
        The new key.
    """
    model = access_key_manager.issue_access_key(
        admin_id=current_admin.id,
        expires_in_days=req.expires_in_days,
    )
    return AccessKeyInfo.model_validate(model)


@router.delete("/{key_id}", summary="Revoke an unused access key")
def delete_access_key(
    key_id: int,
    access_key_manager: AccessKeyManagerDep,
    current_admin: CurrentAdmin,
) -> dict:
    access_key_manager.delete_access_key(key_id)
    return {"success": True, "message": "Access key deleted successfully"}
