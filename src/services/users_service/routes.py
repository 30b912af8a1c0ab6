from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.common.exceptions import ServiceError
from src.services.users_service.dependencies import get_user_service
from src.services.users_service.service import UserService
from src.shared.models.common import PaginatedResponse
from src.shared.models.user_dto import CreateUserRequest, UserDTO, UserRatingRequest

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/", response_model=PaginatedResponse[UserDTO])
async def get_all_users(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    service: UserService = Depends(get_user_service)
):
    return await service.get_all_users(page, size)


@router.get("/{user_id}", response_model=UserDTO)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service)
):
    try:
        return await service.get_user(user_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/", response_model=UserDTO, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: CreateUserRequest,
    service: UserService = Depends(get_user_service)
):
    try:
        return await service.create_user(user_data)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{user_id}", response_model=UserDTO)
async def update_user(
    user_id: str,
    user_data: CreateUserRequest,
    service: UserService = Depends(get_user_service)
):
    try:
        return await service.update_user(user_id, user_data)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service)
):
    try:
        await service.delete_user(user_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/rating", response_model=UserDTO)
async def update_rating(
    user_id: str,
    request: UserRatingRequest,
    service: UserService = Depends(get_user_service)
):
    try:
        return await service.update_rating(user_id, request.rating)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
