"""
User Controller - Login, profile and admin user management endpoints
"""
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List
from lynix.schemas.auth import (
    LoginRequest,
    LoginResponse,
    UserResponse,
    UserCreateRequest,
    UserUpdateRequest,
    PasswordChangeRequest,
    MessageResponse,
)
from lynix.services.exceptions import PermissionDeniedError
from lynix.services.user_service import (
    authenticate_user,
    list_users,
    create_user,
    update_user,
    change_password,
    delete_user,
)
from lynix.utils.security import create_access_token
from lynix.utils.dependencies import get_current_user, get_current_admin

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest):
    """Check credentials and return the profile with an access token"""
    if not request.username or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required."
        )

    user = await authenticate_user(username=request.username, password=request.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password."
        )

    access_token = create_access_token(data={"sub": user["id"], "type": "user"})

    return LoginResponse(**user, access_token=access_token, token_type="bearer")


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current logged-in user"""
    return UserResponse(**user)


@router.get("", response_model=List[UserResponse])
async def get_users(admin: dict = Depends(get_current_admin)):
    """List every user (admin only)"""
    users = await list_users()
    return [UserResponse(**user) for user in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user_endpoint(
    request: UserCreateRequest,
    admin: dict = Depends(get_current_admin)
):
    """Create a user (admin only)"""
    try:
        user = await create_user(request.user_data.model_dump(), request.password)
        return UserResponse(**user)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.put("/{user_id}", response_model=UserResponse)
async def update_user_endpoint(
    user_id: str,
    request: UserUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Update a profile (admins: any user; others: own non-privileged fields)"""
    update_data = request.model_dump(exclude_unset=True)

    try:
        updated_user = await update_user(user_id, update_data, acting_user=current_user)
    except PermissionDeniedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not updated_user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return UserResponse(**updated_user)


@router.patch("/{user_id}/password", response_model=MessageResponse)
async def change_password_endpoint(
    user_id: str,
    request: PasswordChangeRequest,
    current_user: dict = Depends(get_current_user)
):
    """Set a new password (admin, or the user themself)"""
    if current_user["role"] != "admin" and current_user["id"] != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You may only change your own password"
        )

    success = await change_password(user_id, request.password)

    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return MessageResponse(message="Password updated.")


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_endpoint(
    user_id: str,
    admin: dict = Depends(get_current_admin)
):
    """Delete a user (admin only)"""
    success = await delete_user(user_id)

    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
