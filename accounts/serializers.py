"""
Accounts app serializers

Serializers for User model and authentication.
"""
from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for User model.

    Exposes user details including role and organization.
    Password is write-only for security.
    """

    organization_name = serializers.CharField(source='organization.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'role',
            'organization',
            'organization_name',
            'password',
        ]
        extra_kwargs = {
            'password': {'write_only': True},
        }

    def get_fields(self):
        """Only platform admins may set role and organization."""
        fields = super().get_fields()
        request = self.context.get('request')
        user = getattr(request, 'user', None)
        if not (user and user.is_authenticated and (user.role == User.ADMIN or user.is_superuser)):
            for name in ('role', 'organization'):
                fields[name].read_only = True
        return fields

    def validate(self, attrs):
        role = attrs.get('role', getattr(self.instance, 'role', User.STUDENT))
        organization = attrs.get('organization', getattr(self.instance, 'organization', None))
        if role == User.ORGANIZATION and organization is None:
            raise serializers.ValidationError(
                {'organization': 'Organization users must belong to an organization.'}
            )
        return attrs

    def create(self, validated_data):
        """Create user with hashed password."""
        password = validated_data.pop('password', None)
        user = User(**validated_data)
        if password:
            user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        """Update user, handling password properly."""
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
