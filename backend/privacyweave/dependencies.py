from functools import lru_cache

from fastapi import Depends, Header, HTTPException

from privacyweave.config import settings
from privacyweave.schemas.user import UserRecord
from privacyweave.services.auth_service import SessionStore, session_store
from privacyweave.services.email_service import EmailNotifier, email_notifier
from privacyweave.services.whatsapp_service import WhatsAppNotifier, whatsapp_notifier
from privacyweave.storage import Storage, create_storage


@lru_cache
def get_storage() -> Storage:
    return create_storage(settings)


def get_session_store() -> SessionStore:
    return session_store


def get_email_notifier() -> EmailNotifier:
    return email_notifier


def get_whatsapp_notifier() -> WhatsAppNotifier:
    return whatsapp_notifier


def bearer_token(authorization: str | None = Header(None)) -> str | None:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[7:]


async def get_current_user(
    token: str | None = Depends(bearer_token),
    sessions: SessionStore = Depends(get_session_store),
    storage: Storage = Depends(get_storage),
) -> UserRecord | None:
    if not token:
        return None
    user_id = sessions.resolve(token)
    if user_id is None:
        return None
    return storage.get_user(user_id)


async def require_user(user: UserRecord | None = Depends(get_current_user)) -> UserRecord:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


async def require_admin(user: UserRecord | None = Depends(get_current_user)) -> UserRecord:
    # Anonymous and non-admin callers get the same answer
    if user is None or user.role != "admin":
        raise HTTPException(status_code=403, detail="Forbidden")
    return user
