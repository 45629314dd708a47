from pizza_api.domain.errors import AuthError, NotFoundError, RecordNotFoundError
from pizza_api.repos.menu_repo import MenuRepo
from pizza_api.services.credential_service import CredentialService


class MenuService:
    """Read-only menu, visible to anyone holding an unexpired token."""

    def __init__(self, menus: MenuRepo, credentials: CredentialService):
        self.menus = menus
        self.credentials = credentials

    def get_menu(self, token_id) -> dict:
        if self.credentials.active_token(token_id) is None:
            raise AuthError()
        try:
            return self.menus.get_raw_menu()
        except RecordNotFoundError:
            raise NotFoundError("The menu is not available.")
