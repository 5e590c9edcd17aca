# storefront/shared/logger/__init__.py
from storefront.shared.logger.store_logger import StoreLogger

__all__ = ["StoreLogger"]
