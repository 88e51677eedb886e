# -*- coding: utf-8 -*-
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from ..errors import AuthError
from .settings import SECRET_KEY, JWT_ALG, JWT_EXPIRE_MIN

bearer = HTTPBearer(auto_error=False)
# pbkdf2 為預設；舊的 bcrypt 雜湊仍可驗證
pwd = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

def hash_password(plain: str) -> str:
    return pwd.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd.verify(plain, hashed)
    except (ValueError, TypeError):
        return False

def create_token(sub: str, claims: Optional[Dict] = None, minutes: int = JWT_EXPIRE_MIN) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
        **(claims or {}),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=JWT_ALG)

def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALG])
    except jwt.ExpiredSignatureError:
        raise AuthError("token expired")
    except jwt.InvalidTokenError:
        raise AuthError("invalid token")

# 不強制登入：有合法 token 就帶出身分，沒有就是 None
def optional_identity(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> Optional[dict]:
    if not creds or not creds.credentials:
        return None
    try:
        return decode_token(creds.credentials)
    except AuthError:
        return None

def require_identity(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> dict:
    if not creds or not creds.credentials:
        raise AuthError("missing credentials")
    return decode_token(creds.credentials)
