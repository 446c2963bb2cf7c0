# src/auth/routes.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import jwt, JWTError
from datetime import timedelta
from auth.identity import Identity
from auth.services import AuthService, ProfileService
from auth.schemas import UserCreate, UserResponse, UserLogin, Token, ProfileUpdate
from config import settings
from database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
                     db: Session = Depends(get_db)) -> UserResponse:
    """Retrieve the current authenticated, non-blocked user."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = jwt.decode(credentials.credentials, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        account_id: str = payload.get("sub")
        if account_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception
    return AuthService.check_profile(account_id, db)


def as_identity(user: UserResponse) -> Identity:
    return Identity(id=user.id, email=user.email, display_name=user.username)


@router.post("/register", response_model=UserResponse)
def register(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new user."""
    account = AuthService.create_account(user.email, user.password, user.username, db)
    return AuthService.get_profile(account.id, db)


@router.post("/login", response_model=Token)
def login(user: UserLogin, db: Session = Depends(get_db)):
    """Login and return a JWT token."""
    account = AuthService.authenticate(user.email, user.password, db)
    AuthService.check_profile(account.id, db)
    access_token = AuthService.create_access_token(
        data={"sub": account.id}, expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: UserResponse = Depends(get_current_user)):
    """Get current user profile."""
    return current_user


@router.put("/me", response_model=UserResponse)
def update_me(data: ProfileUpdate, current_user: UserResponse = Depends(get_current_user),
              db: Session = Depends(get_db)):
    """Edit the caller's own profile."""
    return ProfileService.update_profile(current_user.id, data, db)


@router.get("/users/{user_id}", response_model=UserResponse)
def read_user(user_id: str, db: Session = Depends(get_db)):
    profile = AuthService.get_profile(user_id, db)
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


@router.get("/verify")
def verify_email(token: str, db: Session = Depends(get_db)):
    AuthService.verify_email(token, db)
    return {"message": "Email verified."}
