from rest_framework import serializers

from store.models import StoreConfig


class StoreConfigSerializer(serializers.ModelSerializer):
    """
    Serializer for the store singleton (identity printed on receipts + print helper location).
    """

    class Meta:
        model = StoreConfig
        fields = [
            "id",
            "store_name",
            "address",
            "phone",
            "instagram",
            "facebook",
            "printer_host",
            "printer_port",
        ]
        read_only_fields = ["id"]

    def validate_store_name(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("Store name is required")
        return v

    def validate_printer_port(self, value):
        v = str(value or "").strip()
        if not v:
            return v
        if not v.isdigit() or not 1 <= int(v) <= 65535:
            raise serializers.ValidationError("Porta inválida (1-65535)")
        return v


class BackupRestoreInputSerializer(serializers.Serializer):
    file = serializers.FileField(required=False)
    backup = serializers.JSONField(required=False)

    def validate(self, attrs):
        if attrs.get("file") is None and attrs.get("backup") is None:
            raise serializers.ValidationError("Envie o arquivo de backup (file) ou o JSON (backup).")
        return attrs
