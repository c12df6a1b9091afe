from fastapi import Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .auth import AuthContext, get_auth_context
from .database import get_db, get_session_factory
from .schemas.action import ActionResult, ActionStatus
from .services.dashboard_service import DashboardService

ACTION_STATUS_CODES = {
    ActionStatus.ok: status.HTTP_200_OK,
    ActionStatus.unauthenticated: status.HTTP_401_UNAUTHORIZED,
    ActionStatus.not_found: status.HTTP_404_NOT_FOUND,
    ActionStatus.invalid: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ActionStatus.conflict: status.HTTP_409_CONFLICT,
    ActionStatus.error: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def get_dashboard_service(
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    auth: AuthContext = Depends(get_auth_context),
) -> DashboardService:
    return DashboardService(db, session_factory, auth)


def action_response(result: ActionResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    status_code = success_status if result.ok else ACTION_STATUS_CODES[result.status]
    return JSONResponse(status_code=status_code, content=result.model_dump(mode="json"))
