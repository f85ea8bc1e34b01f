from .backup_service import (
    BackupError,
    InvalidBackupError,
    RestoreResult,
    backup_filename,
    export_backup,
    restore_backup,
)

__all__ = [
    "BackupError",
    "InvalidBackupError",
    "RestoreResult",
    "backup_filename",
    "export_backup",
    "restore_backup",
]
