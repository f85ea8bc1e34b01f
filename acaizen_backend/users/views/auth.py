from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from backend.api_errors import domain_error_response
from users.serializers import LoginResponseSerializer, LoginSerializer, UserSerializer
from users.services.account_service import AccountError, authenticate_account


class LoginView(APIView):
    """
    Email + password login for the POS terminal.

    Unknown email and wrong password are reported separately
    (USER_NOT_FOUND / WRONG_PASSWORD), both as 401.
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = LoginSerializer  # 🔹 explicit

    @extend_schema(
        request=LoginSerializer,
        responses={200: LoginResponseSerializer},
        description="Authenticate with email and password; returns a JWT pair",
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = authenticate_account(
                email=serializer.validated_data["email"],
                password=serializer.validated_data["password"],
            )
        except AccountError as exc:
            return domain_error_response(exc, http_status=status.HTTP_401_UNAUTHORIZED)

        refresh = RefreshToken.for_user(user)

        return Response(
            {
                "access": str(refresh.access_token),
                "refresh": str(refresh),
                "user": UserSerializer(user).data,
            }
        )
