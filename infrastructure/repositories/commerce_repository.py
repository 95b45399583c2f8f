"""
购物车/订单/交易仓储实现 - 使用SQLAlchemy实现数据访问
"""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from domain.commerce.entity import Cart, CartLine, Order, Transaction
from domain.commerce.repository import CartRepository, OrderRepository, TransactionRepository
from domain.common.exceptions import (
    OrderNotFoundException,
    TransactionAlreadyExistsException,
    TransactionNotFoundException,
)
from infrastructure.models.commerce import CartModel, CartLineModel, OrderModel, TransactionModel
from core.logging_config import get_logger


logger = get_logger(__name__)


class SQLAlchemyCartRepository(CartRepository):
    """购物车仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: CartModel) -> Cart:
        return Cart(
            id=model.id,
            currency=model.currency,
            lines=[
                CartLine(
                    id=line.id,
                    purchasable=line.purchasable,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                )
                for line in model.lines
            ],
            shipping_total=model.shipping_total,
            discount_total=model.discount_total,
            meta=model.meta or {},
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Cart) -> CartModel:
        return CartModel(
            id=entity.id,
            currency=entity.currency,
            shipping_total=entity.shipping_total,
            discount_total=entity.discount_total,
            meta=entity.meta,
            lines=[
                CartLineModel(
                    id=line.id,
                    purchasable=line.purchasable,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                )
                for line in entity.lines
            ],
        )

    async def create(self, cart: Cart) -> Cart:
        db_cart = self._to_model(cart)
        self.session.add(db_cart)
        await self.session.flush()
        logger.info("cart_created", cart_id=db_cart.id, lines=len(db_cart.lines))
        return self._to_entity(db_cart)

    async def get_by_id(self, cart_id: int) -> Optional[Cart]:
        result = await self.session.execute(
            select(CartModel).where(CartModel.id == cart_id)
        )
        db_cart = result.scalar_one_or_none()
        return self._to_entity(db_cart) if db_cart else None


class SQLAlchemyOrderRepository(OrderRepository):
    """订单仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: OrderModel) -> Order:
        return Order(
            id=model.id,
            cart_id=model.cart_id,
            currency=model.currency,
            total=model.total,
            status=model.status,
            placed_at=model.placed_at,
            meta=model.meta or {},
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Order) -> OrderModel:
        return OrderModel(
            id=entity.id,
            cart_id=entity.cart_id,
            currency=entity.currency,
            total=entity.total,
            status=entity.status,
            placed_at=entity.placed_at,
            meta=entity.meta,
        )

    async def create(self, order: Order) -> Order:
        db_order = self._to_model(order)
        self.session.add(db_order)
        await self.session.flush()
        logger.info("order_created", order_id=db_order.id, cart_id=db_order.cart_id, total=db_order.total)
        return self._to_entity(db_order)

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.id == order_id)
        )
        db_order = result.scalar_one_or_none()
        return self._to_entity(db_order) if db_order else None

    async def get_draft_for_cart(self, cart_id: int) -> Optional[Order]:
        result = await self.session.execute(
            select(OrderModel)
            .where(OrderModel.cart_id == cart_id, OrderModel.placed_at.is_(None))
            .order_by(OrderModel.id.desc())
            .limit(1)
        )
        db_order = result.scalar_one_or_none()
        return self._to_entity(db_order) if db_order else None

    async def update(self, order: Order) -> Order:
        result = await self.session.execute(
            select(OrderModel).where(OrderModel.id == order.id)
        )
        db_order = result.scalar_one_or_none()

        if not db_order:
            raise OrderNotFoundException(order.id)

        db_order.status = order.status
        db_order.placed_at = order.placed_at
        db_order.total = order.total
        db_order.meta = order.meta

        await self.session.flush()

        logger.info("order_updated", order_id=db_order.id, status=db_order.status)
        return self._to_entity(db_order)


class SQLAlchemyTransactionRepository(TransactionRepository):
    """交易流水仓储的SQLAlchemy实现"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: TransactionModel) -> Transaction:
        return Transaction(
            id=model.id,
            order_id=model.order_id,
            type=model.type,
            driver=model.driver,
            amount=model.amount,
            reference=model.reference,
            status=model.status,
            success=bool(model.success),
            card_type=model.card_type,
            meta=model.meta or {},
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Transaction) -> TransactionModel:
        return TransactionModel(
            id=entity.id,
            order_id=entity.order_id,
            type=entity.type,
            driver=entity.driver,
            amount=entity.amount,
            reference=entity.reference,
            status=entity.status,
            success=entity.success,
            card_type=entity.card_type,
            meta=entity.meta,
        )

    async def create(self, transaction: Transaction) -> Transaction:
        try:
            db_tx = self._to_model(transaction)
            self.session.add(db_tx)
            await self.session.flush()
        except IntegrityError as e:
            if "reference" in str(e).lower():
                logger.warning("transaction_create_conflict", reference=transaction.reference)
                raise TransactionAlreadyExistsException(transaction.reference) from e
            raise
        logger.info(
            "transaction_created",
            transaction_id=db_tx.id,
            order_id=db_tx.order_id,
            reference=db_tx.reference,
            status=db_tx.status,
        )
        return self._to_entity(db_tx)

    async def get_by_reference(self, reference: str) -> Optional[Transaction]:
        result = await self.session.execute(
            select(TransactionModel).where(TransactionModel.reference == reference)
        )
        db_tx = result.scalar_one_or_none()
        return self._to_entity(db_tx) if db_tx else None

    async def update(self, transaction: Transaction) -> Transaction:
        result = await self.session.execute(
            select(TransactionModel).where(TransactionModel.id == transaction.id)
        )
        db_tx = result.scalar_one_or_none()

        if not db_tx:
            raise TransactionNotFoundException(transaction.id)

        db_tx.status = transaction.status
        db_tx.success = transaction.success
        db_tx.meta = transaction.meta

        await self.session.flush()

        logger.info(
            "transaction_updated",
            transaction_id=db_tx.id,
            reference=db_tx.reference,
            status=db_tx.status,
        )
        return self._to_entity(db_tx)
