from rest_framework import serializers

from permissions.roles import ROLE_CHOICES
from users.models import User


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    Input validation only.
    Authentication is handled by the account service.
    """
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption (no password).
    """
    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "name",
            "role",
            "created_at",
        ]
        read_only_fields = fields


# ---------------- USER WRITE ----------------
class UserWriteSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150)
    role = serializers.ChoiceField(choices=ROLE_CHOICES)
    password = serializers.CharField(
        write_only=True,
        required=False,
        allow_blank=True,
        default="",
        style={"input_type": "password"},
    )

    def validate(self, attrs):
        # creation needs a password; on update blank means "keep current"
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "Senha é obrigatória"})
        return attrs


class LoginResponseSerializer(serializers.Serializer):
    access = serializers.CharField()
    refresh = serializers.CharField()
    user = UserSerializer()
