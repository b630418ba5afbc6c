"""
Area API endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from typing import List, Optional
from uuid import UUID

from bayhomes.repositories.base import ListParams
from bayhomes.schemas.common import MutationResponse
from bayhomes.schemas.area import AreaCreate, AreaUpdate, AreaResponse, AreaDetailResponse
from bayhomes.services.area import AreaService
from bayhomes.utils.dependencies import get_area_service, get_list_params
from bayhomes.utils.responses import mutation_response, set_total_count


router = APIRouter(prefix="/areas", tags=["Areas"])


@router.get(
    "",
    response_model=List[AreaResponse],
    summary="List areas",
    description="Optionally filter by exact area name"
)
async def list_areas(
    response: Response,
    area_name: Optional[str] = Query(None, alias="areaName"),
    params: ListParams = Depends(get_list_params),
    area_service: AreaService = Depends(get_area_service)
) -> List[AreaResponse]:
    areas, total = await area_service.list_areas(area_name=area_name, params=params)
    set_total_count(response, total)
    return [AreaResponse.model_validate(area.to_dict()) for area in areas]


@router.get("/{area_id}", response_model=AreaDetailResponse, summary="Get area details")
async def get_area(
    area_id: UUID,
    area_service: AreaService = Depends(get_area_service)
) -> AreaDetailResponse:
    area = await area_service.get_area(area_id)
    return AreaDetailResponse.model_validate(area.to_dict(include_creator=True))


@router.post(
    "",
    response_model=MutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create area",
    description="Area names are unique; the creator is referenced by email"
)
async def create_area(
    area_data: AreaCreate,
    area_service: AreaService = Depends(get_area_service)
) -> MutationResponse:
    area = await area_service.create_area(area_data)
    return mutation_response("Area created successfully", AreaDetailResponse, area.to_dict(include_creator=True))


@router.put("/{area_id}", response_model=MutationResponse, summary="Update area")
async def update_area(
    area_id: UUID,
    area_data: AreaUpdate,
    area_service: AreaService = Depends(get_area_service)
) -> MutationResponse:
    area = await area_service.update_area(area_id, area_data)
    return mutation_response("Area updated successfully", AreaDetailResponse, area.to_dict(include_creator=True))


@router.delete(
    "/{area_id}",
    response_model=MutationResponse,
    summary="Delete area",
    description="Properties and projects in the area are kept and detached from it"
)
async def delete_area(
    area_id: UUID,
    area_service: AreaService = Depends(get_area_service)
) -> MutationResponse:
    await area_service.delete_area(area_id)
    return mutation_response("Area deleted successfully")
