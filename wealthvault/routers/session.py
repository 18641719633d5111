# wealthvault/routers/session.py
"""
Mocked login and user preferences.

Identity is out of scope: login always returns the same demo user and
the client sends that user's id back in the X-User-Id header.

- POST /session/login        - Demo identity plus preferences
- GET  /session/preferences  - Display currency
- PUT  /session/preferences  - Change display currency (stored immediately)
- POST /session/logout       - Flush and close the caller's session
"""

from fastapi import APIRouter, Depends

from wealthvault.config import settings
from wealthvault.dependencies import (
    get_current_user_id,
    get_portfolio_session,
    get_session_manager,
)
from wealthvault.schemas.session import (
    LoginResponse,
    LogoutResponse,
    PreferencesResponse,
    PreferencesUpdate,
    UserProfile,
)
from wealthvault.services.constants import (
    CURRENCY_SYMBOLS,
    DEMO_USER_EMAIL,
    DEMO_USER_ID,
    DEMO_USER_NAME,
    DEMO_USER_PICTURE,
)
from wealthvault.services.portfolio.session import PortfolioSession, SessionManager

router = APIRouter(
    prefix="/session",
    tags=["Session"],
)


def _preferences(display_currency: str) -> PreferencesResponse:
    return PreferencesResponse(
        display_currency=display_currency,
        supported_currencies=settings.supported_currencies,
        currency_symbol=CURRENCY_SYMBOLS.get(display_currency, display_currency),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in (mocked)",
)
def login(
        manager: SessionManager = Depends(get_session_manager),
) -> LoginResponse:
    """Return the demo identity and open its session."""
    session = manager.get(DEMO_USER_ID)
    return LoginResponse(
        user=UserProfile(
            user_id=DEMO_USER_ID,
            name=DEMO_USER_NAME,
            email=DEMO_USER_EMAIL,
            picture=DEMO_USER_PICTURE,
        ),
        preferences=_preferences(session.state.display_currency),
    )


@router.get(
    "/preferences",
    response_model=PreferencesResponse,
    summary="Get preferences",
)
def get_preferences(
        session: PortfolioSession = Depends(get_portfolio_session),
) -> PreferencesResponse:
    return _preferences(session.state.display_currency)


@router.put(
    "/preferences",
    response_model=PreferencesResponse,
    summary="Update preferences",
)
def update_preferences(
        payload: PreferencesUpdate,
        session: PortfolioSession = Depends(get_portfolio_session),
) -> PreferencesResponse:
    """
    Change the display currency.

    Amounts already paid are not converted. Raises **400** for a currency
    outside the supported list.
    """
    state = session.set_display_currency(payload.display_currency)
    return _preferences(state.display_currency)


@router.post(
    "/logout",
    response_model=LogoutResponse,
    summary="Log out",
)
def logout(
        user_id: str = Depends(get_current_user_id),
        manager: SessionManager = Depends(get_session_manager),
) -> LogoutResponse:
    """Write any pending changes and drop the in-memory session."""
    return LogoutResponse(user_id=user_id, flushed=manager.end(user_id))
