from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .models import User


class UserSerializer(serializers.ModelSerializer):
    photo = serializers.ImageField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'role', 'is_approved',
            'regdno', 'subject', 'batch', 'semester', 'photo', 'created_at',
        ]
        read_only_fields = ['id', 'role', 'is_approved', 'created_at']


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact form embedded in messages, submissions and votes."""

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role', 'regdno']


class RegistrationSerializer(serializers.ModelSerializer):
    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=[('student', 'Student'), ('faculty', 'Faculty')], default='student')

    class Meta:
        model = User
        fields = ['name', 'email', 'password', 'role', 'regdno', 'subject', 'batch', 'semester']

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value.lower()

    def validate(self, attrs):
        role = attrs.get('role', 'student')
        if role == 'student':
            missing = [f for f in ('regdno', 'batch', 'semester') if not attrs.get(f)]
        else:
            missing = [f for f in ('subject', 'batch', 'semester') if not attrs.get(f)]
        if missing:
            raise serializers.ValidationError(
                {field: f"This field is required for {role} accounts." for field in missing}
            )
        if role == 'student' and User.objects.filter(regdno=attrs['regdno']).exists():
            raise serializers.ValidationError({"regdno": "This registration number is already registered."})
        return attrs

    def create(self, validated_data):
        # create_user() hashes the password; the email doubles as username
        return User.objects.create_user(
            username=validated_data['email'],
            is_approved=False,
            **validated_data
        )
