from nexo.models.api_key import ApiKey
from nexo.models.event import Event
from nexo.models.shopping_item import ShoppingItem

__all__ = ["ApiKey", "Event", "ShoppingItem"]
