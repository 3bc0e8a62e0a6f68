from rest_framework import serializers

from apps.accounts.serializers import BuyerMinimalSerializer
from .models import BuddyRequest


class BuddyRequestSerializer(serializers.ModelSerializer):
    """Full request representation as both parties see it."""

    joiner = BuyerMinimalSerializer(read_only=True)
    receiver = BuyerMinimalSerializer(read_only=True)
    effective_status = serializers.CharField(read_only=True)
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = BuddyRequest
        fields = [
            'id',
            'joiner',
            'receiver',
            'status',
            'effective_status',
            'is_expired',
            'cutoff_date',
            'flight_date',
            'ups_next_day',
            'shipping_address_snapshot',
            'order_count',
            'created_at',
            'updated_at',
            'decided_at',
            'cancel_requested_at',
            'closed_at',
            'closed_reason',
        ]
        read_only_fields = fields


class SubmitBuddyRequestSerializer(serializers.Serializer):
    """Serializer for asking a receiver to consolidate shipments."""

    receiver_username = serializers.CharField(required=False, allow_blank=True, max_length=100)
    receiver_id = serializers.UUIDField(required=False)

    def validate(self, attrs):
        username = attrs.get('receiver_username', '').strip().lstrip('@')
        if not username and not attrs.get('receiver_id'):
            raise serializers.ValidationError("Provide receiver_username or receiver_id.")
        attrs['receiver_username'] = username
        return attrs


class BuddyRequestListQuerySerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=['receiver', 'joiner', 'history'], default='history')


class BuddyRoleSerializer(serializers.Serializer):
    """The caller's current role with the requests that define it."""

    role = serializers.CharField(read_only=True)
    joiners = BuddyRequestSerializer(many=True, read_only=True)
    request = BuddyRequestSerializer(read_only=True, allow_null=True)


class BuddyErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
    code = serializers.CharField()
    presentation = serializers.ChoiceField(choices=['dialog', 'toast'])
    current_status = serializers.CharField(required=False)
