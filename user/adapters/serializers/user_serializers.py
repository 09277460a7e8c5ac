from rest_framework import serializers

NAME_PATTERN = r'^[a-zA-Z\s]+$'
PASSWORD_PATTERN = r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)'


class RegisterSerializer(serializers.Serializer):
    name = serializers.RegexField(
        NAME_PATTERN,
        min_length=2,
        max_length=50,
        error_messages={
            'invalid': 'Name can only contain letters and spaces',
            'min_length': 'Name must be between 2 and 50 characters',
            'max_length': 'Name must be between 2 and 50 characters',
        },
    )
    email = serializers.EmailField(error_messages={'invalid': 'Please provide a valid email address'})
    password = serializers.RegexField(
        PASSWORD_PATTERN,
        min_length=6,
        max_length=128,
        trim_whitespace=False,
        error_messages={
            'invalid': 'Password must contain at least one lowercase letter, one uppercase letter, and one number',
            'min_length': 'Password must be between 6 and 128 characters',
            'max_length': 'Password must be between 6 and 128 characters',
        },
    )

    def validate_email(self, value):
        return value.lower()


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'invalid': 'Please provide a valid email address'})
    password = serializers.CharField(
        trim_whitespace=False,
        error_messages={'blank': 'Password is required', 'required': 'Password is required'},
    )

    def validate_email(self, value):
        return value.lower()


class ProfileUpdateSerializer(serializers.Serializer):
    name = serializers.RegexField(
        NAME_PATTERN,
        min_length=2,
        max_length=50,
        required=False,
        error_messages={
            'invalid': 'Name can only contain letters and spaces',
            'min_length': 'Name must be between 2 and 50 characters',
            'max_length': 'Name must be between 2 and 50 characters',
        },
    )
    avatarUrl = serializers.URLField(source='avatar_url', required=False, allow_null=True, allow_blank=True)


class UserListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=50)


class UserSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    email = serializers.EmailField()
    avatarUrl = serializers.CharField(source='avatar_url', allow_null=True)
    isActive = serializers.BooleanField(source='is_active')
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')


class UserSummarySerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    email = serializers.EmailField()
    avatarUrl = serializers.CharField(source='avatar_url', allow_null=True)


class UserDetailSerializer(UserSummarySerializer):
    createdAt = serializers.DateTimeField(source='created_at')
