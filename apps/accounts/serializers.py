from django.conf import settings
from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    handle = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'username',
            'handle',
            'first_name',
            'last_name',
            'profile_image',
            'user_type',
            'created_at',
        ]
        read_only_fields = fields

    def get_handle(self, obj):
        return obj.get_handle()


class BuyerMinimalSerializer(serializers.ModelSerializer):
    """Minimal buyer info for nested serialization."""

    username = serializers.SerializerMethodField()
    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'display_name', 'first_name', 'last_name', 'profile_image']
        read_only_fields = fields

    def get_username(self, obj):
        return obj.get_handle()

    def get_display_name(self, obj):
        return obj.get_display_name()


class CandidateSearchSerializer(serializers.Serializer):
    """Query parameters for candidate search."""

    query = serializers.CharField(required=False, allow_blank=True, default='', max_length=100)
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=settings.CANDIDATE_SEARCH_MAX_LIMIT,
        default=settings.CANDIDATE_SEARCH_DEFAULT_LIMIT,
    )
    offset = serializers.IntegerField(required=False, min_value=0, default=0)


class CandidateSerializer(serializers.Serializer):
    """Candidate receiver as shown in the picker."""

    id = serializers.UUIDField(read_only=True)
    username = serializers.CharField(read_only=True)
    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    email = serializers.EmailField(read_only=True)
    profileImage = serializers.CharField(source='profile_image', read_only=True, allow_null=True)
