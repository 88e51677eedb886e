import logging
from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from .db import get_db, atomic
from .errors import AuthError, ConflictError, ValidationError
from .models import User
from .utils.schemas import RegisterIn, LoginIn, TokenOut, UserOut
from .utils.security import hash_password, verify_password, create_token, require_identity

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

def _find_user(db: Session, username: str):
    return db.execute(select(User).where(User.username == username)).scalars().first()

def register_user(db: Session, username: str, password: str, role: str = "user") -> User:
    username = (username or "").strip()
    if not username or not password:
        raise ValidationError("username and password are required")
    with atomic(db):
        if _find_user(db, username) is not None:
            raise ConflictError(f"username {username!r} already taken")
        user = User(username=username, password_hash=hash_password(password), role=role or "user")
        db.add(user)
        try:
            db.flush()
        except IntegrityError:
            # 併發註冊同名帳號時由 unique 約束擋下
            raise ConflictError(f"username {username!r} already taken")
    log.info(f"User registered: {username} ({user.role})")
    return user

def authenticate(db: Session, username: str, password: str) -> User:
    user = _find_user(db, (username or "").strip())
    if user is None or not verify_password(password or "", user.password_hash):
        log.warning(f"Failed login for {username!r}")
        raise AuthError("invalid username or password")
    return user

def issue_token(user: User) -> str:
    return create_token(user.username, {"uid": user.id, "role": user.role})

@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    user = register_user(db, payload.username, payload.password)
    return UserOut(id=user.id, username=user.username, role=user.role)

@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = authenticate(db, payload.username, payload.password)
    return TokenOut(access_token=issue_token(user))

@router.get("/me")
def me(tok: dict = Depends(require_identity)):
    return {"username": tok.get("sub"), "role": tok.get("role", "user")}
