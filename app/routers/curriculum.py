# =============================================================================
# app/routers/curriculum.py - Curriculum Module Endpoints
# =============================================================================
# Published modules are public. Unpublished modules and all writes are
# admin-only; that is decided by the table policies, not here.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status

from app.auth import get_requester, require_requester
from app.dependencies import CatalogServiceDep, QuizServiceDep
from core.access import Requester
from core.models.assistant import QuizResponse
from core.models.curriculum import (
    CurriculumModuleCreate,
    CurriculumModuleResponse,
    CurriculumModuleUpdate,
)

router = APIRouter()


@router.get("", response_model=list[CurriculumModuleResponse])
async def list_curriculum(
    catalog: CatalogServiceDep,
    requester: Requester = Depends(get_requester),
    grade: Annotated[str | None, Query(description="Filter by grade, e.g. 'Grade 9'")] = None,
    subject: Annotated[str | None, Query(description="Filter by subject")] = None,
    include_unpublished: Annotated[
        bool, Query(description="Admins only: include draft modules")
    ] = False,
):
    """List curriculum modules visible to the caller, newest first."""
    rows = catalog.list_curriculum(
        requester,
        grade=grade,
        subject=subject,
        include_unpublished=include_unpublished,
    )
    return [CurriculumModuleResponse.from_row(row) for row in rows]


@router.post("", response_model=CurriculumModuleResponse, status_code=status.HTTP_201_CREATED)
async def create_curriculum(
    request: CurriculumModuleCreate,
    catalog: CatalogServiceDep,
    requester: Requester = Depends(require_requester),
):
    """Create a curriculum module (admin)."""
    return CurriculumModuleResponse.from_row(catalog.create_curriculum(requester, request))


@router.get("/{module_id}", response_model=CurriculumModuleResponse)
async def get_curriculum(
    module_id: Annotated[UUID, Path(description="Module UUID")],
    catalog: CatalogServiceDep,
    requester: Requester = Depends(get_requester),
):
    return CurriculumModuleResponse.from_row(catalog.get_curriculum(requester, module_id))


@router.patch("/{module_id}", response_model=CurriculumModuleResponse)
async def update_curriculum(
    module_id: Annotated[UUID, Path(description="Module UUID")],
    request: CurriculumModuleUpdate,
    catalog: CatalogServiceDep,
    requester: Requester = Depends(require_requester),
):
    """Update a curriculum module (admin). Omitted fields are unchanged."""
    return CurriculumModuleResponse.from_row(
        catalog.update_curriculum(requester, module_id, request)
    )


@router.delete("/{module_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_curriculum(
    module_id: Annotated[UUID, Path(description="Module UUID")],
    catalog: CatalogServiceDep,
    requester: Requester = Depends(require_requester),
):
    catalog.delete_curriculum(requester, module_id)


@router.post("/{module_id}/quiz", response_model=QuizResponse)
async def generate_quiz(
    module_id: Annotated[UUID, Path(description="Module UUID")],
    catalog: CatalogServiceDep,
    quizzes: QuizServiceDep,
    requester: Requester = Depends(require_requester),
):
    """
    Generate a multiple-choice quiz for a module the caller can see.

    Always 200 once the module is found; when the assistant is unavailable
    or its reply cannot be parsed, `questions` is empty and `status` says why.
    """
    module = catalog.get_curriculum(requester, module_id)
    return quizzes.generate_quiz(module)
