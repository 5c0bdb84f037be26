"""
Admin user management.

Any administrator may list, create and edit users; changing a role or
creating another administrator requires ``super_admin``.  Nobody can
delete their own account.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import require_admin
from ....core.states import UserRole
from ....schemas.common import Message, Page
from ....schemas.user import AdminUserCreate, AdminUserUpdate, UserDetail, UserRead
from ....services.registration_service import RegistrationService
from ....services.user_service import UserService

router = APIRouter()


@router.get("/", response_model=Page[UserRead])
async def list_users(
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Database = Depends(get_db),
) -> Page[UserRead]:
    items, total = await UserService.list_users(
        db, search=search, role=role.value if role else None, limit=limit, offset=offset
    )
    return Page[UserRead](items=items, total=total, limit=limit, offset=offset)


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: AdminUserCreate,
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> UserRead:
    try:
        item = await UserService.create_by_admin(db, current_user, data)
    except ValueError as e:
        raise to_http(e)
    return UserRead(**item)


@router.get("/{user_id}", response_model=UserDetail)
async def get_user(user_id: int = Path(..., description="User ID"), db: Database = Depends(get_db)) -> UserDetail:
    """A user together with all of their registrations."""
    try:
        user = await UserService.get_user(db, user_id)
    except ValueError as e:
        raise to_http(e)
    registrations = await RegistrationService.list_for_user(db, user_id)
    return UserDetail(**user, registrations=registrations)


@router.put("/{user_id}", response_model=UserRead)
async def update_user(
    data: AdminUserUpdate,
    user_id: int = Path(..., description="User ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> UserRead:
    try:
        item = await UserService.update_by_admin(db, current_user, user_id, data)
    except ValueError as e:
        raise to_http(e)
    return UserRead(**item)


@router.delete("/{user_id}", response_model=Message)
async def delete_user(
    user_id: int = Path(..., description="User ID"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Message:
    try:
        await UserService.delete_user(db, current_user, user_id)
    except ValueError as e:
        raise to_http(e)
    return Message(message="User deleted successfully")
