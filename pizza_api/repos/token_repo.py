from pizza_api.data.store import DocumentStore
from pizza_api.repos.base import load_record
from pizza_api.domain.schemas import TokenRecord

COLLECTION = "tokens"


class TokenRepo:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get_token(self, token_id: str) -> TokenRecord:
        return load_record(TokenRecord, self.store.read(COLLECTION, token_id), COLLECTION, token_id)

    def create_token(self, token: TokenRecord) -> TokenRecord:
        self.store.create(COLLECTION, token.id, token.model_dump())
        return token

    def update_token(self, token: TokenRecord) -> TokenRecord:
        self.store.update(COLLECTION, token.id, token.model_dump())
        return token

    def delete_token(self, token_id: str) -> None:
        self.store.delete(COLLECTION, token_id)
