# store/urls.py

from django.urls import path

from store.views import BackupRestoreView, BackupView, PrinterTestView, StoreConfigView

app_name = "store"

urlpatterns = [
    path("config/", StoreConfigView.as_view(), name="config"),
    path("config/test-printer/", PrinterTestView.as_view(), name="config-test-printer"),
    path("backup/", BackupView.as_view(), name="backup"),
    path("backup/restore/", BackupRestoreView.as_view(), name="backup-restore"),
]
