from fastapi import APIRouter, Depends

from garden.api.dependencies import get_credits_service, validate_user_id
from garden.core.response import ApiResponse, success_response
from garden.models.dto import CreditsBalance
from garden.services.credits_service import CreditsService

router = APIRouter(
    prefix="/api/credits",
    tags=["Credits"],
)


@router.get("", response_model=ApiResponse[CreditsBalance])
def get_credits(
    user_id: str = Depends(validate_user_id),
    service: CreditsService = Depends(get_credits_service),
):
    """
    사용 가능한 크레딧 잔액 조회

    - **Header(X-User-Id)**: 사용자 식별 ID (UUID 형식 필수)
    """
    return success_response(result=service.get_balance(user_id))
