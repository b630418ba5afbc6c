"""
User API endpoints.
Users are created by the sign-in flow and are never updated or deleted here.
"""

from fastapi import APIRouter, Depends, Response, status
from typing import List
from uuid import UUID

from bayhomes.repositories.base import ListParams
from bayhomes.schemas.common import MutationResponse
from bayhomes.schemas.user import UserCreate, UserResponse
from bayhomes.services.user import UserService
from bayhomes.utils.dependencies import get_list_params, get_user_service
from bayhomes.utils.responses import mutation_response, set_total_count


router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=List[UserResponse], summary="List users")
async def list_users(
    response: Response,
    params: ListParams = Depends(get_list_params),
    user_service: UserService = Depends(get_user_service)
) -> List[UserResponse]:
    users, total = await user_service.list_users(params)
    set_total_count(response, total)
    return [UserResponse.model_validate(user.to_dict()) for user in users]


@router.get("/{user_id}", response_model=UserResponse, summary="Get user")
async def get_user(
    user_id: UUID,
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    user = await user_service.get_user(user_id)
    return UserResponse.model_validate(user.to_dict())


@router.post(
    "",
    response_model=MutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Get or create user",
    description="Returns the existing user for the email with 200, or creates one with 201"
)
async def create_user(
    user_data: UserCreate,
    response: Response,
    user_service: UserService = Depends(get_user_service)
) -> MutationResponse:
    user, created = await user_service.get_or_create_user(user_data)
    if not created:
        response.status_code = status.HTTP_200_OK
        return mutation_response("User already exists", UserResponse, user.to_dict())
    return mutation_response("User created successfully", UserResponse, user.to_dict())
