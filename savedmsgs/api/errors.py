"""Map archive errors to HTTP responses."""
from fastapi import Depends, HTTPException

from savedmsgs.api.state import AppState, get_state
from savedmsgs.core.errors import ArchiveError, InvalidInput, NotFound, TransportError


def http_error(e: ArchiveError) -> HTTPException:
    if isinstance(e, InvalidInput):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, TransportError):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def require_archive(state: AppState = Depends(get_state)) -> AppState:
    """Dependency: fail with 503 until the archive client is signed in."""
    if not state.ready:
        raise HTTPException(
            status_code=503,
            detail="Telegram not connected. Set TG_APP_ID and TG_APP_HASH and sign in on the terminal.",
        )
    return state
