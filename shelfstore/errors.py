"""Warehouse domain errors.

Raised by the service layer when a lookup fails or a business rule is
violated. Every error carries a stable ``kind`` and a human readable message;
the HTTP layer translates the kind into a status code.
"""


class WarehouseError(Exception):
    kind = "error"
    default_message = "warehouse operation failed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(WarehouseError):
    kind = "not_found"
    default_message = "resource not found"


class ProductNotFound(NotFound):
    default_message = "product not found"

    def __init__(self, sku=None):
        self.sku = sku
        super().__init__()


class ShelfNotFound(NotFound):
    default_message = "shelf not found"

    def __init__(self, shelf_id=None):
        self.shelf_id = shelf_id
        super().__init__()


class ItemNotFound(NotFound):
    default_message = "item not found"

    def __init__(self, item_id=None):
        self.item_id = item_id
        super().__init__()


class UserNotFound(NotFound):
    default_message = "user not found"


class DuplicateKey(WarehouseError):
    kind = "duplicate_key"
    default_message = "unique constraint violated"


class DuplicateSKU(DuplicateKey):
    default_message = "product with this SKU already exists"

    def __init__(self, sku=None):
        self.sku = sku
        super().__init__()


class EmailTaken(DuplicateKey):
    default_message = "email already exists"


class InsufficientVolume(WarehouseError):
    """Adding the requested quantity would push the shelf past its max volume."""

    kind = "insufficient_volume"
    default_message = "insufficient shelf volume"

    def __init__(self, shelf_id=None, used=None, requested=None, max_volume=None):
        self.shelf_id = shelf_id
        self.used = used
        self.requested = requested
        self.max_volume = max_volume
        message = None
        if used is not None and requested is not None and max_volume is not None:
            message = (
                f"insufficient shelf volume: used {used}, requested {requested}, "
                f"max {max_volume}"
            )
        super().__init__(message)


class ReferentialConflict(WarehouseError):
    kind = "referential_conflict"
    default_message = "resource is referenced by other records"


class ProductInUse(ReferentialConflict):
    default_message = "cannot delete product that is in use on shelves"

    def __init__(self, sku=None):
        self.sku = sku
        super().__init__()


class Forbidden(WarehouseError):
    kind = "forbidden"
    default_message = "operation not permitted"
