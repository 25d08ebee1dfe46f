from rest_framework import serializers
from .models import Transaction, Reward, Product, ActivityType


# =============================================================================
# Output Serializers
# =============================================================================

class TransactionSerializer(serializers.ModelSerializer):
    """Ledger entry as shown in the transaction history."""

    kind_display = serializers.CharField(source='get_kind_display', read_only=True)
    signed_amount = serializers.IntegerField(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            'id',
            'kind',
            'kind_display',
            'amount',
            'signed_amount',
            'description',
            'metadata',
            'created_at',
        ]
        read_only_fields = fields


class RewardSerializer(serializers.ModelSerializer):
    kind_display = serializers.CharField(source='get_kind_display', read_only=True)

    class Meta:
        model = Reward
        fields = [
            'id',
            'name',
            'description',
            'kind',
            'kind_display',
            'points_cost',
        ]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['id', 'name', 'reward_points']
        read_only_fields = fields


class BalanceSerializer(serializers.Serializer):
    """Ledger-derived balance with level progress."""

    points = serializers.IntegerField()
    installations = serializers.IntegerField()
    level = serializers.IntegerField()
    progress = serializers.IntegerField()
    next_level_points = serializers.IntegerField(allow_null=True)


class LedgerResultSerializer(serializers.Serializer):
    """Response for ledger writes (redemption, allocation)."""

    transaction = TransactionSerializer()
    balance = serializers.IntegerField()
    level = serializers.IntegerField()
    badges = serializers.ListField(child=serializers.CharField())


# =============================================================================
# Input Serializers
# =============================================================================

class RedeemRewardSerializer(serializers.Serializer):
    reward_id = serializers.UUIDField()


class AllocatePointsSerializer(serializers.Serializer):
    """Admin point allocation input."""

    user_id = serializers.UUIDField()
    amount = serializers.IntegerField(min_value=1)
    activity_type = serializers.ChoiceField(choices=ActivityType.choices)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
