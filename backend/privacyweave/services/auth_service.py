import logging
import time

from privacyweave.config import Settings, settings
from privacyweave.schemas.user import UserCreate, UserRecord
from privacyweave.storage.base import Storage
from privacyweave.utils.security import generate_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class SessionStore:
    """In-process bearer-token sessions: token -> (user id, expires_at)."""

    def __init__(self, ttl_seconds: int | None = None):
        self._ttl_seconds = ttl_seconds
        self._sessions: dict[str, tuple[int, float]] = {}

    def _cleanup_expired(self):
        now = time.time()
        self._sessions = {t: s for t, s in self._sessions.items() if s[1] > now}

    def create(self, user_id: int) -> str:
        self._cleanup_expired()
        ttl = self._ttl_seconds if self._ttl_seconds is not None else settings.session_ttl_seconds
        token = generate_token()
        self._sessions[token] = (user_id, time.time() + ttl)
        return token

    def resolve(self, token: str) -> int | None:
        session = self._sessions.get(token)
        if session is None:
            return None
        user_id, expires_at = session
        if expires_at <= time.time():
            del self._sessions[token]
            return None
        return user_id

    def revoke(self, token: str) -> None:
        self._sessions.pop(token, None)

    def clear(self) -> None:
        self._sessions = {}


session_store = SessionStore()


def authenticate(storage: Storage, username: str, password: str) -> UserRecord | None:
    user = storage.get_user_by_username(username)
    if user is None or not verify_password(user.password_hash, password):
        return None
    return user


def register_user(storage: Storage, data: UserCreate, role: str = "user") -> UserRecord:
    return storage.create_user(data, hash_password(data.password), role=role)


def ensure_admin_user(storage: Storage, config: Settings) -> UserRecord | None:
    """Create the configured admin account on first start. Returns None when not configured."""
    if not (config.admin_username and config.admin_email and config.admin_password):
        return None
    existing = storage.get_user_by_username(config.admin_username)
    if existing:
        if existing.role != "admin":
            logger.warning("User %s exists but is not an admin; leaving it unchanged", existing.username)
        return existing
    admin = register_user(
        storage,
        UserCreate(
            username=config.admin_username,
            email=config.admin_email,
            name="Administrator",
            password=config.admin_password,
        ),
        role="admin",
    )
    logger.info("Created admin user %s", admin.username)
    return admin
