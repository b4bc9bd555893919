from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from ..models.user import User
from ..core.config import Settings
from ..core.errors import InvalidCredentialsError, UserExistsError
from ..core.security import (
    verify_password, get_password_hash, dummy_verify_password,
    create_access_token, UserRole
)
from ..schemas.auth import UserLogin, UserRegister, LoginResponse

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def register_user(self, user_data: UserRegister) -> User:
        """Register a new patient account."""
        email = user_data.email.lower()

        # Check if user already exists
        existing_user = self.db.query(User).filter(User.email == email).first()
        if existing_user:
            raise UserExistsError()

        new_user = User(
            name=user_data.name,
            email=email,
            password_hash=get_password_hash(user_data.password, self.settings.BCRYPT_ROUNDS),
            role=UserRole.PATIENT,
        )
        self.db.add(new_user)

        # A concurrent registration may win between the check and the commit
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise UserExistsError()

        self.db.refresh(new_user)
        logger.info(f"Registered user {new_user.id}")
        return new_user

    def authenticate_user(self, login_data: UserLogin) -> LoginResponse:
        """Check credentials and issue a signed token."""
        user = self.db.query(User).filter(
            User.email == login_data.email.lower()
        ).first()

        if not user:
            dummy_verify_password(self.settings.BCRYPT_ROUNDS)
            logger.info("Failed login for unknown email")
            raise InvalidCredentialsError()

        if not verify_password(login_data.password, user.password_hash):
            logger.info(f"Failed login for user {user.id}")
            raise InvalidCredentialsError()

        token = create_access_token(user.id, user.role, self.settings)
        return LoginResponse(token=token, role=user.role)
