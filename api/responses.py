"""Response envelope helpers shared by the routers."""
from fastapi import HTTPException

def api_error(status_code: int, error: str, message: str) -> HTTPException:
    """Build an HTTPException whose body is the failure envelope."""
    return HTTPException(
        status_code=status_code,
        detail={'success': False, 'error': error, 'message': message}
    )
