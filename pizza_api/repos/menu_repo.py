from pizza_api.data.seed import MENU_COLLECTION, MENU_KEY
from pizza_api.data.store import DocumentStore
from pizza_api.repos.base import load_record
from pizza_api.domain.schemas import Menu


class MenuRepo:
    """Read-only access to the catalog record."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def get_menu(self) -> Menu:
        return load_record(Menu, self.store.read(MENU_COLLECTION, MENU_KEY), MENU_COLLECTION, MENU_KEY)

    def get_raw_menu(self) -> dict:
        return self.store.read(MENU_COLLECTION, MENU_KEY)
