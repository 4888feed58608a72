"""
User management endpoints (Admin only):
  GET  /users               – Paginated, filterable user list
  GET  /users/{id}          – Get a specific user
  PUT  /users/{id}          – Update name, email, role or active flag
  PUT  /users/{id}/status   – Activate or deactivate a user
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from artisan_admin.core.dependencies import db_dependency, require_admin
from artisan_admin.models.user import User, UserRole
from artisan_admin.schemas.user import UserPage, UserResponse, UserStatusUpdate, UserUpdate
from artisan_admin.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=UserPage,
    summary="List users (Admin only)",
)
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None, description="Substring of name or email"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="createdAt, updatedAt or name"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="asc or desc"),
    conn=Depends(db_dependency),
    _: User = Depends(require_admin),
):
    result = UserService(conn).list_users(
        page=page,
        limit=limit,
        role=role,
        is_active=is_active,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return UserPage(
        users=[UserResponse.model_validate(u) for u in result.items],
        current_page=result.current_page,
        total_pages=result.total_pages,
        total_items=result.total_items,
        limit=result.limit,
    )


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a specific user (Admin only)",
)
def get_user(
    user_id: int,
    conn=Depends(db_dependency),
    _: User = Depends(require_admin),
):
    return UserResponse.model_validate(UserService(conn).get_user(user_id))


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user (Admin only)",
)
def update_user(
    user_id: int,
    data: UserUpdate,
    conn=Depends(db_dependency),
    current_user: User = Depends(require_admin),
):
    """Partial update. A changed email must not belong to another account."""
    return UserResponse.model_validate(
        UserService(conn).update_user(user_id, data, updated_by=current_user)
    )


@router.put(
    "/{user_id}/status",
    response_model=UserResponse,
    summary="Activate or deactivate a user (Admin only)",
)
def update_user_status(
    user_id: int,
    data: UserStatusUpdate,
    conn=Depends(db_dependency),
    current_user: User = Depends(require_admin),
):
    """``isActive`` must be a JSON boolean. Admins cannot deactivate themselves."""
    return UserResponse.model_validate(
        UserService(conn).set_active(user_id, data.is_active, updated_by=current_user)
    )
