from typing import Optional, List, Dict, Any
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import User

logger = logging.getLogger("profiles.repository")


class ProfileRepository:
    def create_user(self, db: Session, **fields: Any) -> User:
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def get_by_id(self, db: Session, user_id: str) -> Optional[User]:
        return db.get(User, user_id)

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.scalar(select(User).where(User.email == email))

    def list_with_reset_tokens(self, db: Session) -> List[User]:
        return list(db.scalars(select(User).where(User.reset_password_token.is_not(None))))

    def update_user(self, db: Session, user: User, fields: Dict[str, Any]) -> User:
        for field, value in fields.items():
            setattr(user, field, value)
        db.commit()
        db.refresh(user)
        return user

    def delete_user(self, db: Session, user: User) -> None:
        db.delete(user)
        db.commit()


profile_repository = ProfileRepository()
