"""Category taxonomy endpoint."""

from fastapi import APIRouter, Depends

from app.api.deps import get_owner_id
from app.categorization.registry import all_categories
from app.schemas.transaction import CategoriesResponse

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "",
    response_model=CategoriesResponse,
    summary="List allowed categories",
    description="The fixed category labels accepted for each transaction kind, in display order.",
    dependencies=[Depends(get_owner_id)],
)
async def list_categories() -> CategoriesResponse:
    return CategoriesResponse(**all_categories())
