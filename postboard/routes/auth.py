import hashlib
import logging
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pymongo.errors import DuplicateKeyError

from ..config import BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_EXPIRE_DAYS, JWT_SECRET
from ..dependencies import get_user_store
from ..models.user import TokenOut, UserCreate, UserLogin, UserOut
from ..stores.users import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# auto_error=False so a missing header is a 401 rather than FastAPI's default
security = HTTPBearer(auto_error=False)

GRAVATAR_URL = "https://www.gravatar.com/avatar/{digest}?s=200&r=pg&d=mm"


# ----------------- UTILITY -----------------
def gravatar_url(email: str) -> str:
    digest = hashlib.md5(email.strip().lower().encode()).hexdigest()
    return GRAVATAR_URL.format(digest=digest)


def create_access_token(user_id: str) -> str:
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(days=JWT_EXPIRE_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def to_user_out(user_doc: dict) -> UserOut:
    return UserOut(
        id=str(user_doc["_id"]),
        name=user_doc["name"],
        email=user_doc["email"],
        avatar=user_doc.get("avatar"),
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    users: UserStore = Depends(get_user_store),
) -> dict:
    """Resolve the bearer token to a user document or reject with 401."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="No token, authorization denied")
    try:
        payload = jwt.decode(credentials.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    user_id = payload.get("sub")
    user_doc = users.find_by_id(user_id) if user_id else None
    if not user_doc:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user_doc


# ----------------- REGISTER -----------------
@router.post("/register", response_model=TokenOut)
def register(user: UserCreate, users: UserStore = Depends(get_user_store)):
    email = user.email.lower()
    if users.find_by_email(email):
        raise HTTPException(status_code=400, detail="User already exists")

    hashed_pw = bcrypt.hashpw(user.password.encode(), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    try:
        user_doc = users.create(
            name=user.name,
            email=email,
            password_hash=hashed_pw.decode(),
            avatar=gravatar_url(email),
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User already exists")

    logger.info("Registered user %s", user_doc["_id"])
    return TokenOut(
        access_token=create_access_token(str(user_doc["_id"])),
        user=to_user_out(user_doc),
    )


# ----------------- LOGIN -----------------
@router.post("/login", response_model=TokenOut)
def login(user: UserLogin, users: UserStore = Depends(get_user_store)):
    user_doc = users.find_by_email(user.email.lower())
    if not user_doc:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not bcrypt.checkpw(user.password.encode(), user_doc["passwordHash"].encode()):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return TokenOut(
        access_token=create_access_token(str(user_doc["_id"])),
        user=to_user_out(user_doc),
    )


@router.get("/me", response_model=UserOut)
def get_me(current_user: dict = Depends(get_current_user)):
    return to_user_out(current_user)
