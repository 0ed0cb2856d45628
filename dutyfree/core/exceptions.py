# dutyfree/core/exceptions.py
from fastapi import HTTPException, status


class ProductNotFound(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found",
        )


class CartLineNotFound(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Item not found in cart",
        )


class InvalidQuantity(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Quantity must be at least 1",
        )


class ItemNotFound(HTTPException):
    def __init__(self, label: str = "Item"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} not found",
        )


class DuplicateCollectionItem(HTTPException):
    def __init__(self, collection_label: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"This product is already in the {collection_label} collection",
        )


class DataStoreUnavailable(HTTPException):
    """
    A read or write against the data store failed (network, permission).

    `action` is the operator-facing title, e.g. "Error updating order".
    """

    def __init__(self, action: str = "Data store unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=action,
        )
