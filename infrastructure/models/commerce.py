"""
订单/购物车/交易数据库模型 - SQLAlchemy ORM模型
注意：这是基础设施层的实现细节，不是领域模型
"""
from sqlalchemy import (
    Boolean, Column, Integer, String, DateTime, JSON,
    Index, ForeignKey
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CartModel(Base):
    """购物车数据库模型，金额以最小货币单位存储"""
    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, index=True)
    currency = Column(String(3), nullable=False, default="EUR", comment="货币代码 ISO-4217")
    shipping_total = Column(Integer, nullable=False, default=0, comment="运费（分）")
    discount_total = Column(Integer, nullable=False, default=0, comment="优惠（分）")
    meta = Column(JSON, nullable=True, comment="扩展元数据")

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, comment="创建时间")
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
        comment="更新时间"
    )

    # async 会话下不能惰性加载，使用 selectin
    lines = relationship(
        "CartLineModel",
        back_populates="cart",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="CartLineModel.id",
    )

    def __repr__(self):
        return f"<CartModel(id={self.id}, currency='{self.currency}')>"


class CartLineModel(Base):
    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(
        Integer,
        ForeignKey("carts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    purchasable = Column(String(200), nullable=False, comment="商品标识")
    unit_price = Column(Integer, nullable=False, comment="单价（分）")
    quantity = Column(Integer, nullable=False, default=1)

    cart = relationship("CartModel", back_populates="lines")


class OrderModel(Base):
    """订单数据库模型"""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), nullable=False, index=True)
    currency = Column(String(3), nullable=False)
    total = Column(Integer, nullable=False, comment="订单总额（分）")
    status = Column(
        String(50),
        nullable=False,
        default="awaiting-payment",
        index=True,
        comment="订单状态: awaiting-payment/payment-received"
    )
    placed_at = Column(DateTime(timezone=True), nullable=True, comment="下单完成时间")
    meta = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_orders_cart_placed", "cart_id", "placed_at"),
    )

    def __repr__(self):
        return f"<OrderModel(id={self.id}, cart_id={self.cart_id}, status='{self.status}')>"


class TransactionModel(Base):
    """
    交易流水数据库模型

    reference 为网关支付ID，唯一：每个网关支付仅对应一条交易
    """
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=True, index=True)
    type = Column(String(20), nullable=False, comment="交易类型: intent")
    driver = Column(String(50), nullable=False, index=True, comment="支付驱动")
    amount = Column(Integer, nullable=False, comment="金额（分）")
    reference = Column(String(200), nullable=False, unique=True, comment="网关支付ID")
    status = Column(String(50), nullable=False, index=True)
    success = Column(Boolean, nullable=False, default=False)
    card_type = Column(String(50), nullable=True, comment="支付方式")
    meta = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def __repr__(self):
        return (
            f"<TransactionModel(id={self.id}, reference='{self.reference}', "
            f"driver='{self.driver}', status='{self.status}')>"
        )
