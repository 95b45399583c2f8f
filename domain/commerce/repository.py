"""
Commerce repository interfaces - host-side persistence contracts.
"""
from abc import ABC, abstractmethod
from typing import Optional

from .entity import Cart, Order, Transaction


class CartRepository(ABC):
    """购物车仓储抽象接口"""

    @abstractmethod
    async def create(self, cart: Cart) -> Cart:
        """Persist a new cart with its lines."""
        pass

    @abstractmethod
    async def get_by_id(self, cart_id: int) -> Optional[Cart]:
        pass


class OrderRepository(ABC):
    """订单仓储抽象接口"""

    @abstractmethod
    async def create(self, order: Order) -> Order:
        pass

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        pass

    @abstractmethod
    async def get_draft_for_cart(self, cart_id: int) -> Optional[Order]:
        """Latest order of the cart that has not been placed yet."""
        pass

    @abstractmethod
    async def update(self, order: Order) -> Order:
        pass


class TransactionRepository(ABC):
    """交易流水仓储抽象接口"""

    @abstractmethod
    async def create(self, transaction: Transaction) -> Transaction:
        pass

    @abstractmethod
    async def get_by_reference(self, reference: str) -> Optional[Transaction]:
        """Look up the transaction of a gateway payment id."""
        pass

    @abstractmethod
    async def update(self, transaction: Transaction) -> Transaction:
        pass
