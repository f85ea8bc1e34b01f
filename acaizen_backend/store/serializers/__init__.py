from .store_config import BackupRestoreInputSerializer, StoreConfigSerializer

__all__ = [
    "BackupRestoreInputSerializer",
    "StoreConfigSerializer",
]
