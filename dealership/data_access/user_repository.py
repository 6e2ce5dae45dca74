from sqlalchemy.orm import Session

from dealership.core.security import verify_password
from dealership.models import User

class UserRepository:
    def authenticate(self, db: Session, *, username: str, password: str) -> User | None:
        user = self.get_by_username(db, username=username)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):  # type: ignore
            return None
        return user

    def get_by_username(self, db: Session, *, username: str) -> User | None:
        return db.query(User).filter(User.username == username).first()

    def get_by_user_id(self, db: Session, *, user_id: int) -> User | None:
        return db.get(User, user_id)

user_repo = UserRepository()
