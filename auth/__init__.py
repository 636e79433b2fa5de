"""Authentication module using client credentials and JWT bearer tokens.

This module provides:
1. Token issuance for registered API clients (client id + bcrypt-hashed secret)
2. Access/refresh token pairs signed with separate secrets
3. A FastAPI dependency gating the catalog routes on a valid access token
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import bcrypt
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import BaseModel

from config import settings_conf
from database import get_pool
from database.exceptions import DatabaseError, STORE_EXCEPTIONS

# Configure logging
logger = logging.getLogger(__name__)

# Constants
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

class AuthError(Exception):
    """Base exception for authentication errors."""
    pass

class InvalidCredentialsError(AuthError):
    """Raised when a client id/secret pair is not accepted."""
    pass

class TokenExpiredError(AuthError):
    """Raised when a token's exp claim has passed."""
    pass

class InvalidTokenError(AuthError):
    """Raised when a token is malformed, badly signed, or of the wrong type."""
    pass

class ClientContext(BaseModel):
    """Caller identity carried by a verified token."""
    client_id: str
    token_type: str

class AuthManager:
    """Issues and verifies client tokens."""

    def __init__(self, pool=None, settings: Optional[Dict[str, Any]] = None):
        """Initialize auth manager.

        Args:
            pool: Optional database pool. If not provided, will get from database module.
            settings: Optional settings dict. Defaults to the loaded settings.conf.
        """
        self.pool = pool
        settings = settings or settings_conf
        self.secret = settings['jwt_secret']
        self.refresh_secret = settings['jwt_refresh_secret']
        self.issuer = settings['jwt_issuer']
        self.audience = settings['jwt_audience']
        self.access_expiry = timedelta(minutes=int(settings['access_token_expiry_minutes']))
        self.refresh_expiry = timedelta(days=int(settings['refresh_token_expiry_days']))

    async def ensure_pool(self):
        """Ensure database pool is available."""
        if not self.pool:
            self.pool = await get_pool()

    async def validate_client_credentials(self, client_id: str, client_secret: str) -> bool:
        """Check a client id/secret pair against api_clients.

        Returns:
            True if the client exists, is active and the secret matches
        """
        await self.ensure_pool()

        try:
            async with self.pool.acquire() as conn:
                client = await conn.fetchrow(
                    '''
                    SELECT client_id, client_secret, is_active
                    FROM api_clients
                    WHERE client_id = $1
                    ''',
                    client_id
                )
        except STORE_EXCEPTIONS as e:
            logger.error(f"Client validation error: {e}")
            raise DatabaseError(f"Failed to validate client: {str(e)}") from e

        if not client:
            logger.info(f"Client ID not found: {client_id}")
            return False

        if not client['is_active']:
            logger.info(f"Client is inactive: {client_id}")
            return False

        try:
            valid = bcrypt.checkpw(
                client_secret.encode('utf-8'),
                client['client_secret'].encode('utf-8')
            )
        except ValueError as e:
            logger.error(f"Stored secret for client {client_id} is not a bcrypt hash: {e}")
            return False

        if not valid:
            logger.info(f"Invalid client secret for client: {client_id}")
            return False

        logger.info(f"Client credentials validated successfully for: {client_id}")
        return True

    def _sign(self, client_id: str, token_type: str) -> str:
        now = datetime.now(timezone.utc)
        if token_type == ACCESS_TOKEN:
            secret, expiry = self.secret, self.access_expiry
        else:
            secret, expiry = self.refresh_secret, self.refresh_expiry
        return jwt.encode(
            {
                'clientId': client_id,
                'type': token_type,
                'iss': self.issuer,
                'aud': self.audience,
                'iat': int(now.timestamp()),
                'exp': int((now + expiry).timestamp())
            },
            secret,
            algorithm=JWT_ALGORITHM
        )

    def issue_tokens(self, client_id: str) -> Dict[str, Any]:
        """Create a fresh access/refresh token pair for a client."""
        return {
            'accessToken': self._sign(client_id, ACCESS_TOKEN),
            'refreshToken': self._sign(client_id, REFRESH_TOKEN),
            'tokenType': 'Bearer',
            'expiresIn': int(self.access_expiry.total_seconds()),
            'refreshTokenExpiresIn': int(self.refresh_expiry.total_seconds())
        }

    async def generate_tokens(self, client_id: str, client_secret: str) -> Dict[str, Any]:
        """Exchange client credentials for a token pair.

        Raises:
            InvalidCredentialsError: If the credentials are not accepted
        """
        if not await self.validate_client_credentials(client_id, client_secret):
            raise InvalidCredentialsError("Invalid client ID or client secret")
        return self.issue_tokens(client_id)

    def _verify(self, token: str, secret: str, expected_type: str) -> ClientContext:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[JWT_ALGORITHM],
                audience=self.audience,
                issuer=self.issuer
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JWTError as e:
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        if payload.get('type') != expected_type or not payload.get('clientId'):
            raise InvalidTokenError(f"Not an {expected_type} token")

        return ClientContext(client_id=payload['clientId'], token_type=payload['type'])

    def verify_access_token(self, token: str) -> ClientContext:
        """Verify an access token.

        Raises:
            TokenExpiredError: If the token has expired
            InvalidTokenError: For any other verification failure
        """
        return self._verify(token, self.secret, ACCESS_TOKEN)

    def verify_refresh_token(self, token: str) -> ClientContext:
        """Verify a refresh token (signed with the refresh secret)."""
        return self._verify(token, self.refresh_secret, REFRESH_TOKEN)

    def refresh_tokens(self, refresh_token: str) -> Dict[str, Any]:
        """Issue a new token pair from a valid refresh token."""
        context = self.verify_refresh_token(refresh_token)
        return self.issue_tokens(context.client_id)

# Create global instance
manager = AuthManager()

# FastAPI security scheme; missing headers are reported by get_current_client
auth_scheme = HTTPBearer(
    auto_error=False,
    description="JWT Bearer access token required"
)

def auth_failure(status_code: int, error: str, message: str) -> HTTPException:
    """Build an HTTPException carrying the standard error envelope."""
    return HTTPException(
        status_code=status_code,
        detail={'success': False, 'error': error, 'message': message}
    )

async def get_current_client(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(auth_scheme)
) -> ClientContext:
    """FastAPI dependency for getting the authenticated API client.

    Args:
        credentials: Bearer token credentials

    Returns:
        The verified client context

    Raises:
        HTTPException: 401 if the token is missing or expired, 403 if invalid
    """
    if credentials is None or not credentials.credentials:
        raise auth_failure(
            status.HTTP_401_UNAUTHORIZED,
            'Access token required',
            'Please provide a valid access token in the Authorization header'
        )

    try:
        return manager.verify_access_token(credentials.credentials)
    except TokenExpiredError:
        raise auth_failure(
            status.HTTP_401_UNAUTHORIZED,
            'Token expired',
            'Access token has expired. Please refresh your token.'
        )
    except InvalidTokenError:
        raise auth_failure(
            status.HTTP_403_FORBIDDEN,
            'Invalid token',
            'Invalid or malformed access token'
        )

# Export public interface
__all__ = [
    'manager',
    'AuthManager',
    'ClientContext',
    'get_current_client',
    'auth_scheme',
    'auth_failure',
    'AuthError',
    'InvalidCredentialsError',
    'TokenExpiredError',
    'InvalidTokenError'
]
