"""Payment adapter registry: driver key -> adapter builder."""
from __future__ import annotations

from typing import Callable, Dict, List

from application.services.payment_adapter import PaymentAdapter
from core.logging_config import get_logger


logger = get_logger(__name__)

# Adapter builder type; adapters keep per-request state, so build one per use
AdapterBuilder = Callable[[], PaymentAdapter]


class PaymentAdapterRegistry:
    def __init__(self) -> None:
        self._builders: Dict[str, AdapterBuilder] = {}

    def register(self, driver: str, builder: AdapterBuilder) -> None:
        """Register an adapter builder; a later registration for the same driver wins."""
        self._builders[driver] = builder
        logger.info("payment_adapter_registered", driver=driver)

    def get(self, driver: str) -> PaymentAdapter:
        """Build the adapter for ``driver``.

        Raises:
            ValueError: If no adapter is registered under ``driver``
        """
        builder = self._builders.get(driver)
        if builder is None:
            raise ValueError(
                f"Payment adapter '{driver}' not registered. Available: {self.drivers()}"
            )
        return builder()

    def drivers(self) -> List[str]:
        return sorted(self._builders)

    def __contains__(self, driver: object) -> bool:
        return driver in self._builders
