"""Infrastructure models package exports."""
from .base import Base, metadata
from .commerce import CartModel, CartLineModel, OrderModel, TransactionModel

__all__ = [
    "Base",
    "metadata",
    "CartModel",
    "CartLineModel",
    "OrderModel",
    "TransactionModel",
]
