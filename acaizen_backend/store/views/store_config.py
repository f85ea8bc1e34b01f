# store/views/store_config.py

"""
STORE SETTINGS VIEWS

Purpose:
- Store identity + print helper location (singleton)
- Printer test page
- Full backup download / destructive restore

Endpoints:
- GET        /api/store/config/                (staff)
- PUT/PATCH  /api/store/config/                (admin)
- POST       /api/store/config/test-printer/   (admin) -> {"printed": bool}
- GET        /api/store/backup/                (admin) -> JSON attachment
- POST       /api/store/backup/restore/        (admin) -> {"restored": {...counts}}
"""

import json

from django.http import HttpResponse
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import domain_error_response, error_response
from permissions.roles import CAP_POS_SELL, CAP_SETTINGS_MANAGE, HasAnyCapability
from sales.services.printer_dispatcher import send_test_page
from store.models import StoreConfig
from store.serializers import BackupRestoreInputSerializer, StoreConfigSerializer
from store.services.backup_service import (
    BackupError,
    backup_filename,
    export_backup,
    restore_backup,
)


class _SettingsView(APIView):
    required_any_capabilities = {CAP_SETTINGS_MANAGE}

    def get_permissions(self):
        return [IsAuthenticated(), HasAnyCapability()]


class StoreConfigView(_SettingsView):
    """
    Store configuration API (singleton, created with defaults on first read)
    """

    def get_permissions(self):
        if self.request.method == "GET":
            self.required_any_capabilities = {CAP_POS_SELL, CAP_SETTINGS_MANAGE}
        return super().get_permissions()

    @extend_schema(responses={200: StoreConfigSerializer})
    def get(self, request):
        return Response(StoreConfigSerializer(StoreConfig.load()).data)

    @extend_schema(request=StoreConfigSerializer, responses={200: StoreConfigSerializer})
    def put(self, request):
        return self._save(request, partial=False)

    @extend_schema(request=StoreConfigSerializer, responses={200: StoreConfigSerializer})
    def patch(self, request):
        return self._save(request, partial=True)

    def _save(self, request, *, partial: bool):
        ser = StoreConfigSerializer(StoreConfig.load(), data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response(ser.data, status=status.HTTP_200_OK)


class PrinterTestView(_SettingsView):
    @extend_schema(request=None, responses={200: dict})
    def post(self, request):
        return Response({"printed": send_test_page()}, status=status.HTTP_200_OK)


class BackupView(_SettingsView):
    @extend_schema(responses={(200, "application/json"): dict})
    def get(self, request):
        content = json.dumps(export_backup(), ensure_ascii=False, indent=2)

        response = HttpResponse(content, content_type="application/json; charset=utf-8")
        response["Content-Disposition"] = f'attachment; filename="{backup_filename()}"'
        return response


class BackupRestoreView(_SettingsView):
    @extend_schema(request=BackupRestoreInputSerializer, responses={200: dict})
    def post(self, request):
        ser = BackupRestoreInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        upload = ser.validated_data.get("file")
        if upload is not None:
            try:
                data = json.loads(upload.read().decode("utf-8-sig"))
            except (UnicodeDecodeError, json.JSONDecodeError):
                return error_response(
                    code="INVALID_BACKUP",
                    message="O arquivo não contém dados válidos de backup",
                )
        else:
            data = ser.validated_data["backup"]

        try:
            result = restore_backup(data)
        except BackupError as exc:
            return domain_error_response(exc)

        return Response(
            {
                "restored": result.counts,
                "default_admin_created": result.default_admin_created,
            },
            status=status.HTTP_200_OK,
        )
