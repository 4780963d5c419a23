from sqlalchemy.orm import Session

from backoffice.core.errors import NotFoundError
from backoffice.models.client_profile import ClientProfile


def get_profile_by_id(db: Session, client_id: int) -> ClientProfile | None:
    return db.query(ClientProfile).filter(ClientProfile.id == client_id).first()


def get_profile_by_user_id(db: Session, user_id: str) -> ClientProfile | None:
    return db.query(ClientProfile).filter(ClientProfile.user_id == user_id).first()


class SqlClientDirectory:
    def __init__(self, db: Session):
        self.db = db

    def get(self, client_id: int) -> ClientProfile:
        profile = get_profile_by_id(self.db, client_id)
        if profile is None:
            raise NotFoundError("Client profile", client_id)
        return profile

    def find_by_user_id(self, user_id: str) -> ClientProfile:
        profile = get_profile_by_user_id(self.db, user_id)
        if profile is None:
            raise NotFoundError(
                "Client profile",
                user_id,
                message=f"No client profile found for user {user_id}",
            )
        return profile
