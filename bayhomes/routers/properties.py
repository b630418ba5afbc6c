"""
Property API endpoints: list, detail, create, update (full, partial or status-only) and delete.
"""

from fastapi import APIRouter, Body, Depends, Query, Response, status
from typing import Any, Dict, List, Optional
from uuid import UUID

from bayhomes.models.property import PropertyStatus
from bayhomes.repositories.base import ListParams
from bayhomes.schemas.common import MutationResponse
from bayhomes.schemas.property import (
    PropertyCreate,
    PropertyStatusUpdate,
    PropertyResponse,
    PropertyDetailResponse,
    parse_property_update
)
from bayhomes.services.property import PropertyService
from bayhomes.utils.dependencies import get_list_params, get_property_service
from bayhomes.utils.responses import mutation_response, set_total_count


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=List[PropertyResponse],
    summary="List properties",
    description="Filter by title substring, type and status; the total count is in the x-total-count header"
)
async def list_properties(
    response: Response,
    title_like: Optional[str] = Query(None, description="Case-insensitive title substring"),
    property_type: Optional[str] = Query(None, alias="propertyType", description="Exact property type"),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status", description="active or archived"),
    params: ListParams = Depends(get_list_params),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties, total = await property_service.list_properties(
        title_like=title_like,
        property_type=property_type,
        status=status_filter,
        params=params
    )
    set_total_count(response, total)
    return [PropertyResponse.model_validate(property_obj.to_dict()) for property_obj in properties]


@router.get(
    "/{property_id}",
    response_model=PropertyDetailResponse,
    summary="Get property details",
    description="Property with its area and creator populated"
)
async def get_property(
    property_id: UUID,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDetailResponse:
    property_obj = await property_service.get_property(property_id)
    return PropertyDetailResponse.model_validate(property_obj.to_dict(include_relations=True))


@router.post(
    "",
    response_model=MutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Area and user are referenced by areaName and email and must exist"
)
async def create_property(
    property_data: PropertyCreate,
    property_service: PropertyService = Depends(get_property_service)
) -> MutationResponse:
    """
    Create a new property listing.

    Args:
        property_data: Property creation data
        property_service: Property service instance

    Returns:
        Envelope with the created property
    """
    property_obj = await property_service.create_property(property_data)
    return mutation_response(
        "Property created successfully",
        PropertyDetailResponse,
        property_obj.to_dict(include_relations=True)
    )


@router.put(
    "/{property_id}",
    response_model=MutationResponse,
    summary="Update property",
    description="A body with only 'status' archives or re-activates the listing; any other body updates the supplied fields"
)
@router.patch(
    "/{property_id}",
    response_model=MutationResponse,
    summary="Update property (partial)"
)
async def update_property(
    property_id: UUID,
    payload: Dict[str, Any] = Body(...),
    property_service: PropertyService = Depends(get_property_service)
) -> MutationResponse:
    """
    Update a property.

    Args:
        property_id: UUID of the property
        payload: Raw body, routed to the status-only or the field update command
        property_service: Property service instance

    Returns:
        Envelope with the updated property
    """
    command = parse_property_update(payload)

    if isinstance(command, PropertyStatusUpdate):
        property_obj = await property_service.update_property_status(property_id, command)
        return mutation_response(
            f"Property status updated to {command.status.value}",
            PropertyResponse,
            property_obj.to_dict()
        )

    property_obj = await property_service.update_property(property_id, command)
    return mutation_response(
        "Property updated successfully",
        PropertyDetailResponse,
        property_obj.to_dict(include_relations=True)
    )


@router.delete(
    "/{property_id}",
    response_model=MutationResponse,
    summary="Delete property",
    description="Removes the property, its back-references and its images"
)
async def delete_property(
    property_id: UUID,
    property_service: PropertyService = Depends(get_property_service)
) -> MutationResponse:
    await property_service.delete_property(property_id)
    return mutation_response("Property deleted successfully")
