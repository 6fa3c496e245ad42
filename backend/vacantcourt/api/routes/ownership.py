"""
Ownership transfer: the current owner hands a facility to another registered user.

Every rejection returns {"error": message} with its own status (see core.errors). The bearer
credential is verified before the body is read and before any store access.
"""
import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from vacantcourt.api.deps import get_store, get_verifier
from vacantcourt.core.errors import RequestError, error_response
from vacantcourt.services.auth import TokenVerifier
from vacantcourt.services.ownership_service import transfer_ownership
from vacantcourt.services.store.base import FacilityStore

router = APIRouter()
logger = logging.getLogger(__name__)


def _str_field(payload: Any, key: str) -> str | None:
    if not isinstance(payload, dict):
        return None
    value = payload.get(key)
    return value if isinstance(value, str) else None


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


@router.post("/transfer-ownership")
async def transfer_court_ownership(
    request: Request,
    authorization: str | None = Header(None),
    verifier: TokenVerifier = Depends(get_verifier),
    store: FacilityStore = Depends(get_store),
):
    """Transfer courtId to the user registered under newOwnerEmail. Non-string fields count as missing."""
    try:
        user = verifier.authenticate(authorization)
        payload = await _read_json(request)
        result = await asyncio.to_thread(
            transfer_ownership,
            store,
            user.uid,
            _str_field(payload, "courtId"),
            _str_field(payload, "newOwnerEmail"),
        )
    except RequestError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Error transferring ownership: %s", e)
        return error_response(e)
    return JSONResponse(status_code=200, content=result)
