"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Security, status
from typing import Optional
from pydantic import BaseModel
from fastapi.security import HTTPAuthorizationCredentials

from auth import (
    AuthManager, auth_scheme, manager,
    InvalidCredentialsError, TokenExpiredError, InvalidTokenError
)
from database import get_pool
from ..responses import api_error

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"]
)

class TokenRequest(BaseModel):
    """Request model for exchanging client credentials."""
    clientId: Optional[str] = None
    clientSecret: Optional[str] = None

class RefreshRequest(BaseModel):
    """Request model for refreshing a token pair."""
    refreshToken: Optional[str] = None

@router.post("/generate-token")
async def generate_token(request: TokenRequest, pool=Depends(get_pool)):
    """Exchange client credentials for access and refresh tokens."""
    if not request.clientId or not request.clientSecret:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            'Missing credentials',
            'Client ID and Client Secret are required'
        )

    try:
        tokens = await AuthManager(pool=pool).generate_tokens(request.clientId, request.clientSecret)
    except InvalidCredentialsError:
        raise api_error(
            status.HTTP_401_UNAUTHORIZED,
            'Invalid credentials',
            'Invalid client ID or client secret'
        )

    return {
        'success': True,
        'data': tokens,
        'message': 'Tokens generated successfully'
    }

@router.post("/refresh-token")
async def refresh_token(request: RefreshRequest):
    """Issue a new token pair from a refresh token."""
    if not request.refreshToken:
        raise api_error(
            status.HTTP_401_UNAUTHORIZED,
            'Refresh token required',
            'Please provide a refresh token'
        )

    try:
        tokens = manager.refresh_tokens(request.refreshToken)
    except TokenExpiredError:
        raise api_error(
            status.HTTP_401_UNAUTHORIZED,
            'Refresh token expired',
            'Refresh token has expired. Please authenticate again.'
        )
    except InvalidTokenError:
        raise api_error(
            status.HTTP_403_FORBIDDEN,
            'Invalid refresh token',
            'Invalid or malformed refresh token'
        )

    return {
        'success': True,
        'data': tokens,
        'message': 'Tokens refreshed successfully'
    }

@router.post("/validate-token")
async def validate_token(credentials: Optional[HTTPAuthorizationCredentials] = Security(auth_scheme)):
    """Report whether the bearer access token is currently valid."""
    if credentials is None:
        raise api_error(
            status.HTTP_401_UNAUTHORIZED,
            'No token provided',
            'Access token is required'
        )

    try:
        context = manager.verify_access_token(credentials.credentials)
    except (TokenExpiredError, InvalidTokenError):
        raise api_error(
            status.HTTP_401_UNAUTHORIZED,
            'Invalid token',
            'Token is invalid or expired'
        )

    return {
        'success': True,
        'data': {
            'valid': True,
            'clientId': context.client_id,
            'type': context.token_type
        },
        'message': 'Token is valid'
    }

# Export the router
__all__ = ['router']
