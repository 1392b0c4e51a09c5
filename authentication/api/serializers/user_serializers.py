from rest_framework import serializers

from authentication.domain.models import CustomUser
from authentication.domain.services.user_service import SELF_ASSIGNABLE_ROLES


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ("id", "email", "name", "role", "is_verified", "photo_url", "date_joined")
        read_only_fields = fields


class UserUpsertSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=SELF_ASSIGNABLE_ROLES, required=False)
    photo_url = serializers.URLField(max_length=500, required=False, allow_blank=True)


class TokenRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()
