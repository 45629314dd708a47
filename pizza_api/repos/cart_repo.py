from pizza_api.data.store import DocumentStore
from pizza_api.repos.base import load_record
from pizza_api.domain.schemas import CartItemRecord

COLLECTION = "cart"


class CartRepo:
    def __init__(self, store: DocumentStore):
        self.store = store

    def get_cart_item(self, cart_id: str) -> CartItemRecord:
        return load_record(CartItemRecord, self.store.read(COLLECTION, cart_id), COLLECTION, cart_id)

    def add_cart_item(self, item: CartItemRecord) -> CartItemRecord:
        self.store.create(COLLECTION, item.id, item.model_dump())
        return item

    def update_cart_item(self, item: CartItemRecord) -> CartItemRecord:
        self.store.update(COLLECTION, item.id, item.model_dump())
        return item

    def delete_cart_item(self, cart_id: str) -> None:
        self.store.delete(COLLECTION, cart_id)
