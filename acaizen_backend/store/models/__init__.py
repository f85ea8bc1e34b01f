from .store_config import SINGLETON_ID, StoreConfig

__all__ = [
    "SINGLETON_ID",
    "StoreConfig",
]
