"""Widget authentication: site key in, session and signed token out."""

import structlog
from fastapi import APIRouter, Depends, Query, Request

from lingolive.api.deps import get_session_store
from lingolive.core.config import settings
from lingolive.core.exceptions import InvalidSiteKeyError, MissingSiteKeyError
from lingolive.core.security import create_session_token, validate_site_key
from lingolive.schemas.session import AuthResponse
from lingolive.services.language.normalizer import SUPPORTED_LANGUAGES, browser_language, safe_language_code
from lingolive.store.sessions import SessionStore

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/auth", response_model=AuthResponse)
async def authenticate_widget(
    request: Request,
    site_key: str | None = Query(None, alias="siteKey"),
    store: SessionStore = Depends(get_session_store),
) -> AuthResponse:
    """Create a session for a widget and issue its session token.

    The suggested default language is the first supported tag of the
    browser's Accept-Language header, else the configured default.
    """
    if not site_key:
        raise MissingSiteKeyError()
    if not validate_site_key(site_key):
        logger.warning("auth_invalid_site_key", site_key=site_key)
        raise InvalidSiteKeyError()

    session = store.create(site_key)
    token = create_session_token(session.session_id, site_key)

    return AuthResponse(
        session_id=session.session_id,
        session_token=token,
        allowed_languages=list(SUPPORTED_LANGUAGES),
        default_language=browser_language(
            request.headers.get("accept-language"),
            fallback=safe_language_code(settings.default_language),
        ),
    )
