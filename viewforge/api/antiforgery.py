"""Anti-forgery token API routes.

Form handlers post the token they received with a submitted form; each
token issued by a rendered page can be redeemed exactly once.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from viewforge.api.deps import get_token_registry
from viewforge.api.schemas import TokenRedeemRequest, TokenRedeemResponse
from viewforge.core.tokens import TokenRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/antiforgery", tags=["antiforgery"])


@router.post("/redeem", response_model=TokenRedeemResponse)
def redeem_token(
    request: TokenRedeemRequest,
    tokens: TokenRegistry = Depends(get_token_registry),
) -> TokenRedeemResponse:
    """Redeem a token issued by a rendered page.

    Raises:
        HTTPException: 403 if the token is unknown or already redeemed.
    """
    if not tokens.consume(request.token):
        logger.warning("Rejected unknown or reused anti-forgery token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid anti-forgery token",
        )

    return TokenRedeemResponse(redeemed=True)
