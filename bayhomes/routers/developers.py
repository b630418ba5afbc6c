"""
Developer API endpoints.
The detail view also lists the developer's projects.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from typing import List, Optional
from uuid import UUID

from bayhomes.models.developer import Developer
from bayhomes.repositories.base import ListParams
from bayhomes.schemas.common import MutationResponse
from bayhomes.schemas.developer import (
    DeveloperCreate,
    DeveloperUpdate,
    DeveloperResponse,
    DeveloperDetailResponse
)
from bayhomes.services.developer import DeveloperService
from bayhomes.utils.dependencies import get_developer_service, get_list_params
from bayhomes.utils.responses import mutation_response, set_total_count


router = APIRouter(prefix="/developers", tags=["Developers"])


async def _detail(developer: Developer, developer_service: DeveloperService) -> dict:
    document = developer.to_dict(include_creator=True)
    projects = await developer_service.get_developer_projects(developer)
    document["projects"] = [project.to_summary() for project in projects]
    return document


@router.get(
    "",
    response_model=List[DeveloperResponse],
    summary="List developers",
    description="Optionally filter by exact developer name"
)
async def list_developers(
    response: Response,
    developer_name: Optional[str] = Query(None, alias="developerName"),
    params: ListParams = Depends(get_list_params),
    developer_service: DeveloperService = Depends(get_developer_service)
) -> List[DeveloperResponse]:
    developers, total = await developer_service.list_developers(developer_name=developer_name, params=params)
    set_total_count(response, total)
    return [DeveloperResponse.model_validate(developer.to_dict()) for developer in developers]


@router.get(
    "/{developer_id}",
    response_model=DeveloperDetailResponse,
    summary="Get developer details",
    description="Developer with its creator and projects"
)
async def get_developer(
    developer_id: UUID,
    developer_service: DeveloperService = Depends(get_developer_service)
) -> DeveloperDetailResponse:
    developer = await developer_service.get_developer(developer_id)
    return DeveloperDetailResponse.model_validate(await _detail(developer, developer_service))


@router.post(
    "",
    response_model=MutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create developer"
)
async def create_developer(
    developer_data: DeveloperCreate,
    developer_service: DeveloperService = Depends(get_developer_service)
) -> MutationResponse:
    developer = await developer_service.create_developer(developer_data)
    return mutation_response(
        "Developer created successfully",
        DeveloperDetailResponse,
        developer.to_dict(include_creator=True)
    )


@router.put("/{developer_id}", response_model=MutationResponse, summary="Update developer")
async def update_developer(
    developer_id: UUID,
    developer_data: DeveloperUpdate,
    developer_service: DeveloperService = Depends(get_developer_service)
) -> MutationResponse:
    developer = await developer_service.update_developer(developer_id, developer_data)
    return mutation_response(
        "Developer updated successfully",
        DeveloperDetailResponse,
        await _detail(developer, developer_service)
    )


@router.delete(
    "/{developer_id}",
    response_model=MutationResponse,
    summary="Delete developer",
    description="The developer's projects are kept and detached from it"
)
async def delete_developer(
    developer_id: UUID,
    developer_service: DeveloperService = Depends(get_developer_service)
) -> MutationResponse:
    await developer_service.delete_developer(developer_id)
    return mutation_response("Developer deleted successfully")
