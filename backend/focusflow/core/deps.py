from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from focusflow.core.security import decode_access_token
from focusflow.database import get_db
from focusflow.models.user import User
from focusflow.services.activity_service import ActivityService
from focusflow.services.binding_service import BindingResolver
from focusflow.services.checklist_service import ChecklistService
from focusflow.services.focus_session_service import FocusSessionService
from focusflow.services.task_store_service import TaskStoreRepository

bearer = HTTPBearer(auto_error=False)


def _credentials_error(detail: str = "Invalid authentication credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str | None, db: Session) -> User | None:
    if not token:
        return None
    payload = decode_access_token(token)
    if payload is None or payload.get("sub") is None:
        return None
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    authorization: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    access_token: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
) -> User:
    """Get the authenticated user from a Bearer token or the login cookie."""
    token = authorization.credentials if authorization else access_token
    if not token:
        raise _credentials_error("Not authenticated")

    user = _user_from_token(token, db)
    if user is None:
        raise _credentials_error()
    return user


def get_repository(db: Session = Depends(get_db)) -> TaskStoreRepository:
    return TaskStoreRepository(db)


def get_activity_service(db: Session = Depends(get_db)) -> ActivityService:
    return ActivityService(db)


def get_binding_resolver(
    repository: TaskStoreRepository = Depends(get_repository),
    activity: ActivityService = Depends(get_activity_service),
) -> BindingResolver:
    return BindingResolver(repository, activity)


def get_checklist_service(
    repository: TaskStoreRepository = Depends(get_repository),
    activity: ActivityService = Depends(get_activity_service),
) -> ChecklistService:
    return ChecklistService(repository, activity)


def get_focus_session_service(
    db: Session = Depends(get_db),
    resolver: BindingResolver = Depends(get_binding_resolver),
) -> FocusSessionService:
    return FocusSessionService(db, resolver)
