from fastapi import APIRouter, Depends, HTTPException

from privacyweave.dependencies import bearer_token, get_session_store, get_storage, require_user
from privacyweave.schemas.user import LoginRequest, SessionResponse, UserCreate, UserRecord, UserResponse
from privacyweave.services.auth_service import SessionStore, authenticate, register_user
from privacyweave.storage import Storage

router = APIRouter(tags=["auth"])


def _session(user: UserRecord, sessions: SessionStore) -> SessionResponse:
    return SessionResponse(user=UserResponse.model_validate(user.model_dump()), token=sessions.create(user.id))


@router.post("/register", response_model=SessionResponse, status_code=201)
async def register(
    req: UserCreate,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store),
):
    if storage.get_user_by_username(req.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    user = register_user(storage, req)
    return _session(user, sessions)


@router.post("/login", response_model=SessionResponse)
async def login(
    req: LoginRequest,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store),
):
    user = authenticate(storage, req.username, req.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return _session(user, sessions)


@router.post("/logout", status_code=204)
async def logout(
    token: str | None = Depends(bearer_token),
    sessions: SessionStore = Depends(get_session_store),
):
    if token:
        sessions.revoke(token)


@router.get("/user", response_model=UserResponse)
async def current_user(user: UserRecord = Depends(require_user)):
    return UserResponse.model_validate(user.model_dump())
