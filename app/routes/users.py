from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
import logging

from app.config import settings
from app.db import db
from app.errors import ConflictError, MethodNotAllowedError, UserServiceError, ValidationError
from app.repositories.users import UserRepository
from app.schemas.user import UserCreate, UserUpdate
from app.services.user_service import UserService

router = APIRouter(
    prefix="",
    tags=["users"],
    responses={404: {"description": "Not found"}}
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    MethodNotAllowedError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
}

async def get_user_service() -> UserService:
    if db.db is None:
        await db.connect()
    return UserService(UserRepository(db.db.users), bcrypt_rounds=settings.BCRYPT_ROUNDS)

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})

def service_error_response(error: UserServiceError) -> JSONResponse:
    # Subclasses inherit the status of the nearest mapped parent
    status_code = next(
        (ERROR_STATUS[cls] for cls in type(error).__mro__ if cls in ERROR_STATUS),
        status.HTTP_400_BAD_REQUEST
    )
    return error_response(status_code, error.message)

def internal_error_response() -> JSONResponse:
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

def user_not_found() -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, "User not found")

def id_required() -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, "User ID is required")

@router.get("")
async def get_users(id: Optional[str] = None, service: UserService = Depends(get_user_service)):
    """
    Get users
    Without `id`: list of all users. With `id`: that user, or 404.
    """
    try:
        if id:
            user = await service.get_user(id)
            if not user:
                return user_not_found()
            return user.to_response()

        users = await service.list_users()
        return [user.to_response() for user in users]
    except Exception as e:
        logger.error(f"Error fetching users: {str(e)}", exc_info=True)
        return internal_error_response()

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, service: UserService = Depends(get_user_service)):
    """
    Create a user (self-registration, PATIENT only)
    Expects: {
        "name": str,
        "email": str,
        "password": str,
        "role": "ADMIN" | "DOCTOR" | "PATIENT" | "RECEPTIONIST"
    }
    """
    try:
        user = await service.create_user(user_data)
        return user.to_response()
    except UserServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.error(f"Error creating user: {str(e)}", exc_info=True)
        return internal_error_response()

@router.patch("")
async def update_user(user_data: UserUpdate, id: Optional[str] = None, service: UserService = Depends(get_user_service)):
    """
    Update an existing user
    Any subset of name, email, password and role.
    """
    if not id:
        return id_required()
    try:
        user = await service.update_user(id, user_data)
        if not user:
            return user_not_found()
        return user.to_response()
    except UserServiceError as e:
        return service_error_response(e)
    except Exception as e:
        logger.error(f"Error updating user: {str(e)}", exc_info=True)
        return internal_error_response()

@router.delete("")
async def delete_user(id: Optional[str] = None, service: UserService = Depends(get_user_service)):
    if not id:
        return id_required()
    try:
        if not await service.delete_user(id):
            return user_not_found()
        return {"message": "User deleted successfully"}
    except Exception as e:
        logger.error(f"Error deleting user: {str(e)}", exc_info=True)
        return internal_error_response()
