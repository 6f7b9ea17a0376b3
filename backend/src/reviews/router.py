import logging

from fastapi import APIRouter, HTTPException, Path, status

from src.auth.dependencies import CurrentUserDep
from src.reviews.dependencies import ReviewServiceDep
from src.reviews.models import (
    ReviewCreate,
    ReviewUpdate,
    ReviewRead,
    ReviewListResponse,
    ReviewMutationResponse,
    ReviewDeleteResponse,
)
from src.reviews.exceptions import (
    ReviewException,
    ReviewNotFoundException,
    ReviewProductNotFoundException,
    DuplicateReviewException,
    ReviewPermissionException,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def handle_review_service_errors(e: Exception):
    if isinstance(e, (ReviewNotFoundException, ReviewProductNotFoundException)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    elif isinstance(e, DuplicateReviewException):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    elif isinstance(e, ReviewPermissionException):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)
    elif isinstance(e, ReviewException):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    else:
        logger.error(f"[Review API] Unexpected error: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error processing review request.")


@router.post("", response_model=ReviewMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    review: ReviewCreate,
    service: ReviewServiceDep,
    current_user: CurrentUserDep,
    product_id: int = Path(..., ge=1),
):
    """Publie l'avis de l'utilisateur connecté sur un produit."""
    try:
        created = await service.create_review(product_id=product_id, user=current_user, review_data=review)
    except Exception as e:
        handle_review_service_errors(e)
    return ReviewMutationResponse(success=True, review=created, message="Review created successfully")


@router.get("", response_model=ReviewListResponse)
async def read_product_reviews(service: ReviewServiceDep, product_id: int = Path(..., ge=1)):
    try:
        return await service.get_product_reviews(product_id=product_id)
    except Exception as e:
        handle_review_service_errors(e)


@router.get("/{review_id}", response_model=ReviewRead)
async def read_review(
    service: ReviewServiceDep,
    product_id: int = Path(..., ge=1),
    review_id: int = Path(..., ge=1),
):
    try:
        return await service.get_review(product_id=product_id, review_id=review_id)
    except Exception as e:
        handle_review_service_errors(e)


@router.put("/{review_id}", response_model=ReviewMutationResponse)
async def update_review(
    review: ReviewUpdate,
    service: ReviewServiceDep,
    current_user: CurrentUserDep,
    product_id: int = Path(..., ge=1),
    review_id: int = Path(..., ge=1),
):
    """Modifie un avis (auteur uniquement)."""
    try:
        updated = await service.update_review(product_id, review_id, current_user, review)
    except Exception as e:
        handle_review_service_errors(e)
    return ReviewMutationResponse(success=True, review=updated, message="Review updated successfully")


@router.delete("/{review_id}", response_model=ReviewDeleteResponse)
async def delete_review(
    service: ReviewServiceDep,
    current_user: CurrentUserDep,
    product_id: int = Path(..., ge=1),
    review_id: int = Path(..., ge=1),
):
    """Supprime un avis (auteur ou admin)."""
    try:
        await service.delete_review(product_id, review_id, current_user)
    except Exception as e:
        handle_review_service_errors(e)
    return ReviewDeleteResponse(success=True, message="Review deleted successfully")
