from rest_framework import serializers
from django.contrib.auth import get_user_model

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User model."""
    role_display = serializers.CharField(source='get_role_display', read_only=True)
    employee_type_display = serializers.CharField(source='get_employee_type_display', read_only=True)
    full_name = serializers.SerializerMethodField()
    password = serializers.CharField(write_only=True, required=False, allow_blank=True)

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name', 'full_name',
            'employee_number', 'phone_number', 'status', 'role', 'role_display',
            'employee_type', 'employee_type_display', 'weekly_salary',
            'is_active', 'is_staff', 'is_superuser',
            'date_joined', 'last_login', 'password',
        ]
        read_only_fields = ['date_joined', 'last_login', 'is_superuser']

    def get_full_name(self, obj):
        return obj.get_full_name() or obj.username

    def create(self, validated_data):
        password = validated_data.pop('password', None)
        user = User(**validated_data)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save()
        return user

    def update(self, instance, validated_data):
        # Handle password separately if provided
        password = validated_data.pop('password', None)
        if password:
            instance.set_password(password)

        # Update other fields
        for attr, value in validated_data.items():
            setattr(instance, attr, value)

        instance.save()
        return instance


class ProfileSerializer(UserSerializer):
    """Self-service profile: employees cannot promote themselves."""

    class Meta(UserSerializer.Meta):
        read_only_fields = UserSerializer.Meta.read_only_fields + [
            'role', 'employee_type', 'weekly_salary', 'status', 'is_active', 'is_staff',
            'employee_number',
        ]
