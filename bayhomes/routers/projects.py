"""
Project API endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from typing import List, Optional
from uuid import UUID

from bayhomes.repositories.base import ListParams
from bayhomes.schemas.common import MutationResponse
from bayhomes.schemas.project import ProjectCreate, ProjectUpdate, ProjectResponse, ProjectDetailResponse
from bayhomes.services.project import ProjectService
from bayhomes.utils.dependencies import get_list_params, get_project_service
from bayhomes.utils.responses import mutation_response, set_total_count


router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get(
    "",
    response_model=List[ProjectResponse],
    summary="List projects",
    description="Filter by project name substring and project type"
)
async def list_projects(
    response: Response,
    project_name_like: Optional[str] = Query(None, alias="projectName_like"),
    project_type: Optional[str] = Query(None, alias="projectType"),
    params: ListParams = Depends(get_list_params),
    project_service: ProjectService = Depends(get_project_service)
) -> List[ProjectResponse]:
    projects, total = await project_service.list_projects(
        project_name_like=project_name_like,
        project_type=project_type,
        params=params
    )
    set_total_count(response, total)
    return [ProjectResponse.model_validate(project.to_dict()) for project in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectDetailResponse,
    summary="Get project details",
    description="Project with its area, developer and creator populated"
)
async def get_project(
    project_id: UUID,
    project_service: ProjectService = Depends(get_project_service)
) -> ProjectDetailResponse:
    project = await project_service.get_project(project_id)
    return ProjectDetailResponse.model_validate(project.to_dict(include_relations=True))


@router.post(
    "",
    response_model=MutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="Area, developer and user are referenced by areaName, developerName and email"
)
async def create_project(
    project_data: ProjectCreate,
    project_service: ProjectService = Depends(get_project_service)
) -> MutationResponse:
    """
    Create a project with its gallery, cover and floor plan images.

    Args:
        project_data: Project creation data
        project_service: Project service instance

    Returns:
        Envelope with the created project
    """
    project = await project_service.create_project(project_data)
    return mutation_response(
        "Project created successfully",
        ProjectDetailResponse,
        project.to_dict(include_relations=True)
    )


@router.put("/{project_id}", response_model=MutationResponse, summary="Update project")
async def update_project(
    project_id: UUID,
    project_data: ProjectUpdate,
    project_service: ProjectService = Depends(get_project_service)
) -> MutationResponse:
    project = await project_service.update_project(project_id, project_data)
    return mutation_response(
        "Project updated successfully",
        ProjectDetailResponse,
        project.to_dict(include_relations=True)
    )


@router.delete(
    "/{project_id}",
    response_model=MutationResponse,
    summary="Delete project",
    description="Removes the project, its back-references and its images"
)
async def delete_project(
    project_id: UUID,
    project_service: ProjectService = Depends(get_project_service)
) -> MutationResponse:
    await project_service.delete_project(project_id)
    return mutation_response("Project deleted successfully")
