from sqlalchemy.orm import Session

from focusflow.core.security import hash_password, verify_password
from focusflow.models.user import User
from focusflow.schemas.user import UserCreate


class AuthService:
    """Account registration and password login."""

    @staticmethod
    def create_user(db: Session, user_create: UserCreate) -> User:
        """Create a new user."""
        username = user_create.username.strip()
        if db.query(User).filter(User.username == username).first():
            raise ValueError("Username already exists")

        if db.query(User).filter(User.email == user_create.email).first():
            raise ValueError("Email already exists")

        db_user = User(
            username=username,
            email=user_create.email,
            hashed_password=hash_password(user_create.password),
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
        return db_user

    @staticmethod
    def authenticate_user(db: Session, username: str, password: str) -> User | None:
        """Return the user when the password matches."""
        user = db.query(User).filter(User.username == username).first()
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user
