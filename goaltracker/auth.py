"""
Shared API key check for the /api routes.
Requests must send the GOALTRACKER_API_KEY value in the X-API-Key header.
"""
from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from goaltracker import constants

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: str = Security(api_key_header)) -> str:
    if not api_key or api_key != constants.API_KEY:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API Key"
        )
    return api_key
