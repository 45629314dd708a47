# pizza_api/data/seed.py
from pizza_api.data.store import DocumentStore
from pizza_api.domain.errors import RecordExistsError
from pizza_api.utils.logging import get_logger

logger = get_logger(__name__)

MENU_COLLECTION = "pizzaMenu"
MENU_KEY = "menu"

DEFAULT_MENU = {
    "items": [
        {"name": "Margherita", "description": "Tomato sauce, mozzarella, fresh basil", "price": 8.5},
        {"name": "Marinara", "description": "Tomato sauce, garlic, oregano", "price": 7.0},
        {"name": "Pepperoni", "description": "Tomato sauce, mozzarella, pepperoni", "price": 10.0},
        {"name": "Quattro Formaggi", "description": "Mozzarella, gorgonzola, parmesan, fontina", "price": 11.5},
        {"name": "Capricciosa", "description": "Ham, mushrooms, artichokes, olives", "price": 11.0},
        {"name": "Diavola", "description": "Spicy salami, chili, mozzarella", "price": 10.5},
    ]
}


def seed_menu(store: DocumentStore) -> bool:
    """Create the menu record unless one is already there. Returns True if written."""
    if store.exists(MENU_COLLECTION, MENU_KEY):
        return False
    try:
        store.create(MENU_COLLECTION, MENU_KEY, DEFAULT_MENU)
    except RecordExistsError:
        return False
    logger.info(f"Seeded {MENU_COLLECTION}/{MENU_KEY} with {len(DEFAULT_MENU['items'])} items")
    return True
