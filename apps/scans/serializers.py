from rest_framework import serializers
from .models import ScannedUnit
from .services import RejectionReason


# =============================================================================
# Input Serializers
# =============================================================================

class ScanSubmitSerializer(serializers.Serializer):
    """Raw text decoded from a warranty QR code."""

    # Length and shape are checked by the parser so every failure carries a reason
    code = serializers.CharField(allow_blank=True, trim_whitespace=False)


# =============================================================================
# Output Serializers
# =============================================================================

class ScanAcceptedSerializer(serializers.Serializer):
    accepted = serializers.BooleanField(default=True)
    unit_id = serializers.CharField()
    product_name = serializers.CharField(allow_null=True)
    points_awarded = serializers.IntegerField()
    new_balance = serializers.IntegerField()
    badges = serializers.ListField(child=serializers.CharField())


class ScanRejectedSerializer(serializers.Serializer):
    accepted = serializers.BooleanField(default=False)
    reason = serializers.ChoiceField(choices=RejectionReason.choices)
    detail = serializers.CharField()
    retryable = serializers.BooleanField()


class ScannedUnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = ScannedUnit
        fields = [
            'unit_id',
            'product_name',
            'points_awarded',
            'matched_by',
            'scanned_at',
        ]
        read_only_fields = fields
