from rest_framework import serializers
from .models import Badge


class BadgeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Badge
        fields = [
            'id',
            'name',
            'description',
            'icon',
            'min_points',
            'min_installations',
        ]
        read_only_fields = fields


class BadgeStatusSerializer(BadgeSerializer):
    """Badge with the caller's live earned flag."""

    earned = serializers.BooleanField(read_only=True)

    class Meta(BadgeSerializer.Meta):
        fields = BadgeSerializer.Meta.fields + ['earned']
        read_only_fields = fields
