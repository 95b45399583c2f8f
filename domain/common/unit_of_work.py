"""Unit of Work 抽象定义"""
from __future__ import annotations

from abc import ABC, abstractmethod

from domain.commerce.repository import CartRepository, OrderRepository, TransactionRepository


class AbstractUnitOfWork(ABC):
    """应用层事务边界控制抽象"""

    cart_repository: CartRepository
    order_repository: OrderRepository
    transaction_repository: TransactionRepository

    def __init__(self) -> None:
        self._committed = False
        self.cart_repository = None  # type: ignore[assignment]
        self.order_repository = None  # type: ignore[assignment]
        self.transaction_repository = None  # type: ignore[assignment]

    async def __aenter__(self) -> "AbstractUnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            # 未显式提交时自动提交
            if not self._committed:
                await self.commit()

    @abstractmethod
    async def commit(self) -> None:
        """提交事务"""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """回滚事务"""
        ...
