from shelfstore.models.users import User, UserRole
from shelfstore.models.product import Product
from shelfstore.models.shelf import Shelf, ShelfItem
from shelfstore.models.log import Log

__all__ = ["User", "UserRole", "Product", "Shelf", "ShelfItem", "Log"]
