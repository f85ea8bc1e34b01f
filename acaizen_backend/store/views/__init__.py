from .store_config import BackupRestoreView, BackupView, PrinterTestView, StoreConfigView

__all__ = [
    "BackupRestoreView",
    "BackupView",
    "PrinterTestView",
    "StoreConfigView",
]
