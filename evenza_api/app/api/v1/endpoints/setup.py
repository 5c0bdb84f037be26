"""One-time creation of the first super administrator."""

from fastapi import APIRouter, Depends, HTTPException, status

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.states import UserRole
from ....schemas.user import UserCreate, UserRead
from ....services.user_service import UserService

router = APIRouter()


@router.post("/admin", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def setup_admin(data: UserCreate, db: Database = Depends(get_db)) -> UserRead:
    """Create a ``super_admin`` account.

    Only allowed while the platform has no administrator at all;
    afterwards administrators are managed from the admin users routes.
    """
    if await UserService.admin_exists(db):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="An administrator already exists")
    try:
        user = await UserService.create_user(db, data, role=UserRole.SUPER_ADMIN.value)
    except ValueError as e:
        raise to_http(e)
    return UserRead(**user)
