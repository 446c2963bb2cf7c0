# src/auth/services.py
import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session
from jose import jwt
from passlib.context import CryptContext
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4
from auth import exceptions
from auth.exceptions import AuthError
from auth.models import Account, User, new_id
from auth.schemas import UserResponse, ProfileUpdate, USER, is_valid_email
from notifications.services import EmailService
from config import settings

logger = logging.getLogger(__name__)


class AuthService:
    pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        return AuthService.pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return AuthService.pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token."""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def get_account(account_id: str, db: Session) -> Optional[Account]:
        return db.query(Account).filter(Account.id == account_id).first()

    @staticmethod
    def get_account_by_email(email: str, db: Session) -> Optional[Account]:
        """Retrieve an account by email."""
        return db.query(Account).filter(Account.email == email.strip().lower()).first()

    @staticmethod
    def get_profile(user_id: str, db: Session) -> Optional[UserResponse]:
        """Read a user profile through the schema boundary."""
        user = db.query(User).filter(User.id == user_id).first()
        return UserResponse.model_validate(user) if user else None

    @staticmethod
    def create_account(email: str, password: str, username: str, db: Session) -> Account:
        """Register credentials and the matching profile."""
        email = email.strip().lower()
        if not is_valid_email(email):
            raise AuthError(exceptions.INVALID_EMAIL)
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise AuthError(exceptions.WEAK_PASSWORD)
        if AuthService.get_account_by_email(email, db):
            raise AuthError(exceptions.EMAIL_IN_USE)

        username = username.strip()
        account = Account(
            id=new_id(),
            email=email,
            password_hash=AuthService.hash_password(password),
            display_name=username,
            verification_token=uuid4().hex,
        )
        profile = User(
            id=account.id,
            email=email,
            username=username,
            role=USER,
            disabled=False,
            needs_profile_setup=True,
        )
        db.add(account)
        db.add(profile)
        db.commit()
        db.refresh(account)
        logger.info(f"Registered account {account.id}")

        AuthService.send_verification_email(account)
        return account

    @staticmethod
    def send_verification_email(account: Account) -> bool:
        verify_url = f"{settings.BASE_FRONT_URL}/verify?token={account.verification_token}"
        try:
            EmailService.send_email([account.email], "Verify Your Email", f"Click to verify: {verify_url}")
        except Exception as e:
            logger.error(f"SMTP error sending verification to {account.email}: {str(e)}", exc_info=True)
            return False
        return True

    @staticmethod
    def authenticate(email: str, password: str, db: Session) -> Account:
        """Check credentials, raising AuthError with the failure kind."""
        if not is_valid_email(email.strip()):
            raise AuthError(exceptions.INVALID_EMAIL)
        account = AuthService.get_account_by_email(email, db)
        if not account:
            raise AuthError(exceptions.USER_NOT_FOUND)
        if not AuthService.verify_password(password, account.password_hash):
            raise AuthError(exceptions.WRONG_PASSWORD)
        return account

    @staticmethod
    def check_profile(account_id: str, db: Session) -> UserResponse:
        """The profile must still exist and must not be blocked."""
        profile = AuthService.get_profile(account_id, db)
        if profile is None:
            raise AuthError(exceptions.USER_DELETED)
        if profile.disabled:
            raise AuthError(exceptions.USER_DISABLED)
        return profile

    @staticmethod
    def update_display_name(account_id: str, display_name: str, db: Session) -> None:
        account = AuthService.get_account(account_id, db)
        if not account:
            raise AuthError(exceptions.USER_NOT_FOUND)
        account.display_name = display_name.strip()
        db.commit()

    @staticmethod
    def verify_email(token: str, db: Session) -> Account:
        account = db.query(Account).filter(Account.verification_token == token).first()
        if not account:
            raise HTTPException(status_code=400, detail="Invalid or expired token")
        account.email_verified = True
        account.verification_token = None
        db.commit()
        return account


class ProfileService:
    @staticmethod
    def update_profile(user_id: str, data: ProfileUpdate, db: Session) -> UserResponse:
        """Write the editable profile fields and finish first-time setup."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        user.username = data.username
        user.age = data.age
        user.bio = data.bio
        user.photo_url = data.photo_url
        user.needs_profile_setup = False
        db.commit()
        db.refresh(user)
        return UserResponse.model_validate(user)
