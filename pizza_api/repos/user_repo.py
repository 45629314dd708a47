from pizza_api.data.store import DocumentStore
from pizza_api.repos.base import load_record
from pizza_api.domain.schemas import UserRecord

COLLECTION = "users"


class UserRepo:
    def __init__(self, store: DocumentStore):
        self.store = store

    def user_exists(self, email: str) -> bool:
        return self.store.exists(COLLECTION, email)

    def get_user(self, email: str) -> UserRecord:
        return load_record(UserRecord, self.store.read(COLLECTION, email), COLLECTION, email)

    def create_user(self, user: UserRecord) -> UserRecord:
        self.store.create(COLLECTION, user.email, user.model_dump())
        return user

    def update_user(self, user: UserRecord) -> UserRecord:
        self.store.update(COLLECTION, user.email, user.model_dump())
        return user

    def delete_user(self, email: str) -> None:
        self.store.delete(COLLECTION, email)
