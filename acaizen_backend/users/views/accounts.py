"""
PATH: users/views/accounts.py

STAFF ACCOUNT MANAGEMENT (admin only)

- list / retrieve / create / update / delete
- all invariants live in users.services.account_service
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.api_errors import domain_error_response
from permissions.roles import IsAdmin
from users.models import User
from users.serializers import UserSerializer, UserWriteSerializer
from users.services.account_service import (
    AccountError,
    create_account,
    delete_account,
    update_account,
)


class UserViewSet(viewsets.ModelViewSet):
    queryset = User.objects.all().order_by("created_at")
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    filterset_fields = ["role"]

    @extend_schema(request=UserWriteSerializer, responses={201: UserSerializer})
    def create(self, request, *args, **kwargs):
        serializer = UserWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            user = create_account(
                email=data["email"],
                password=data["password"],
                name=data["name"],
                role=data["role"],
            )
        except AccountError as exc:
            return domain_error_response(exc)

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UserWriteSerializer, responses={200: UserSerializer})
    def update(self, request, *args, **kwargs):
        account = self.get_object()
        partial = kwargs.pop("partial", False)

        serializer = UserWriteSerializer(account, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            user = update_account(
                account=account,
                email=data.get("email"),
                password=data.get("password") or None,
                name=data.get("name"),
                role=data.get("role"),
            )
        except AccountError as exc:
            return domain_error_response(exc)

        return Response(UserSerializer(user).data)

    def destroy(self, request, *args, **kwargs):
        account = self.get_object()

        try:
            delete_account(actor=request.user, account=account)
        except AccountError as exc:
            return domain_error_response(exc)

        return Response(status=status.HTTP_204_NO_CONTENT)
