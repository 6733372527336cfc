"""API Dependencies - Authentication"""
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from typing import Dict, Optional

from domain.auth import User, UserInDB
from infrastructure.security import decode_access_token, get_password_hash
from api.schemas import TokenData

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")

# Seed accounts; a real deployment backs this with the user store
fake_users_db = {
    "admin": {
        "username": "admin",
        "full_name": "Front Desk Admin",
        "email": "admin@example.com",
        "plain_password": "admin123",
        "is_admin": True,
        "disabled": False,
        "user_id": "123e4567-e89b-12d3-a456-426614174000"
    },
    "guest": {
        "username": "guest",
        "full_name": "Demo Guest",
        "email": "guest@example.com",
        "plain_password": "guest123",
        "is_admin": False,
        "disabled": False,
        "user_id": "9b2f6c1e-3d4a-4f5b-8c7d-0e1f2a3b4c5d"
    },
}

_password_hash_cache: Dict[str, str] = {}


def _get_hashed_password(username: str) -> str:
    """Lazily hash seed passwords on first access"""
    if username not in _password_hash_cache:
        user = fake_users_db.get(username)
        if user and "plain_password" in user:
            _password_hash_cache[username] = get_password_hash(user["plain_password"])
    return _password_hash_cache.get(username, "")


def get_user(db, username: str) -> Optional[UserInDB]:
    if username not in db:
        return None
    user_dict = dict(db[username])
    if "plain_password" in user_dict:
        del user_dict["plain_password"]
        user_dict["hashed_password"] = _get_hashed_password(username)
    return UserInDB(**user_dict)


async def get_current_user(token: str = Depends(oauth2_scheme)) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token_data = TokenData(username=decode_access_token(token))
    if token_data.username is None:
        raise credentials_exception

    user = get_user(fake_users_db, username=token_data.username)
    if user is None:
        raise credentials_exception
    return user


async def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if current_user.disabled:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user


async def get_current_admin(current_user: User = Depends(get_current_active_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
