"""
API endpoints for obtaining access tokens.

``POST /api/tokens`` exchanges a username and password for a token pair;
``POST /api/refreshtokens`` exchanges a pending refresh token for a new pair.
Neither requires a bearer token.
"""

from fastapi import APIRouter

from project_management_api.core.models.io import ErrorResponse, RefreshTokenRequest, TokenRequest, TokenResponse
from project_management_api.server.services.deps import TokenServiceDep

from .common import VALIDATION_RESPONSES

router = APIRouter(tags=["authentication"])

UNAUTHORIZED_RESPONSES = {401: {"model": ErrorResponse, "description": "Authentication failed"}}


@router.post(
    "/tokens",
    response_model=TokenResponse,
    summary="Log In",
    description=(
        "Verify a username and password and issue an access token plus a refresh token. "
        "All earlier refresh tokens of the user stop working."
    ),
    responses={**VALIDATION_RESPONSES, **UNAUTHORIZED_RESPONSES},
)
async def login(payload: TokenRequest, tokens: TokenServiceDep) -> TokenResponse:
    issued = await tokens.login(payload)
    return issued.to_response()


@router.post(
    "/refreshtokens",
    response_model=TokenResponse,
    summary="Refresh Tokens",
    description=(
        "Exchange a pending refresh token for a new access token and refresh token. "
        "A refresh token can be used once."
    ),
    responses={**VALIDATION_RESPONSES, **UNAUTHORIZED_RESPONSES},
)
async def refresh(payload: RefreshTokenRequest, tokens: TokenServiceDep) -> TokenResponse:
    issued = await tokens.refresh(payload)
    return issued.to_response()
