"""Commerce domain exports (carts, orders, transactions)."""
from .entity import Cart, CartLine, Order, OrderStatus, Transaction
from .repository import CartRepository, OrderRepository, TransactionRepository

__all__ = [
    "Cart",
    "CartLine",
    "Order",
    "OrderStatus",
    "Transaction",
    "CartRepository",
    "OrderRepository",
    "TransactionRepository",
]
