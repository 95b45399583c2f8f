"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
        )


class CartNotFoundException(BusinessException):
    def __init__(self, cart_id: Optional[int] = None):
        details = {"cart_id": cart_id} if cart_id is not None else None
        super().__init__(
            code=BusinessCode.CART_NOT_FOUND,
            message="Cart not found",
            error_type="CartNotFound",
            details=details,
        )


class OrderNotFoundException(BusinessException):
    def __init__(self, order_id: Optional[int] = None):
        details = {"order_id": order_id} if order_id is not None else None
        super().__init__(
            code=BusinessCode.ORDER_NOT_FOUND,
            message="Order not found",
            error_type="OrderNotFound",
            details=details,
        )


class TransactionNotFoundException(BusinessException):
    def __init__(self, transaction_id: Optional[int] = None):
        details = {"transaction_id": transaction_id} if transaction_id is not None else None
        super().__init__(
            code=BusinessCode.TRANSACTION_NOT_FOUND,
            message="Transaction not found",
            error_type="TransactionNotFound",
            details=details,
        )


class TransactionAlreadyExistsException(BusinessException):
    def __init__(self, reference: str):
        super().__init__(
            code=BusinessCode.TRANSACTION_ALREADY_EXISTS,
            message=f"Transaction already exists for reference {reference}",
            error_type="TransactionAlreadyExists",
            details={"reference": reference},
        )
