"""
API依赖项 - 支付网关、事件分发、Unit of Work 与支付适配器的组装
"""
from functools import lru_cache

from fastapi import Depends

from application.ports.events import EventDispatcher
from application.ports.payment_gateway import PaymentGateway
from application.services.mollie_adapter import MolliePaymentAdapter
from application.services.payment_adapter import PaymentAdapter, UnitOfWorkFactory
from application.services.registry import PaymentAdapterRegistry
from core.settings import payment_settings
from infrastructure.events.dispatcher import InMemoryEventDispatcher
from infrastructure.external.payments import get_mollie_client
from infrastructure.unit_of_work import SQLAlchemyUnitOfWork


@lru_cache
def get_event_dispatcher() -> EventDispatcher:
    """进程内事件分发器（单例），监听器在启动时订阅"""
    return InMemoryEventDispatcher()


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    # 显式传入配置，SDK 客户端由包装器自行持有
    return get_mollie_client(payment_settings.mollie)


def get_uow_factory() -> UnitOfWorkFactory:
    return SQLAlchemyUnitOfWork


def get_adapter_registry(
    gateway: PaymentGateway = Depends(get_payment_gateway),
    events: EventDispatcher = Depends(get_event_dispatcher),
    uow_factory: UnitOfWorkFactory = Depends(get_uow_factory),
) -> PaymentAdapterRegistry:
    config = payment_settings.mollie
    registry = PaymentAdapterRegistry()
    registry.register(
        config.driver,
        lambda: MolliePaymentAdapter(gateway=gateway, uow_factory=uow_factory, events=events, config=config),
    )
    return registry


def get_mollie_adapter(
    registry: PaymentAdapterRegistry = Depends(get_adapter_registry),
) -> PaymentAdapter:
    return registry.get(payment_settings.mollie.driver)
