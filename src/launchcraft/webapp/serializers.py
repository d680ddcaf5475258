"""Serializers for API requests and responses."""

from rest_framework import serializers

from launchcraft.schemas.copy import GenerationKind


class GenerateRequestSerializer(serializers.Serializer):
    """Serializer for generate request. The project itself is validated by the pipeline."""

    type = serializers.ChoiceField(choices=[kind.value for kind in GenerationKind])
    projectData = serializers.JSONField()


class GenerateResultSerializer(serializers.Serializer):
    """Serializer for a successful generation."""

    success = serializers.BooleanField(default=True)
    type = serializers.CharField()
    data = serializers.DictField()
    usage = serializers.DictField()


class RegisterRequestSerializer(serializers.Serializer):
    """Serializer for register request."""

    name = serializers.CharField(min_length=2, trim_whitespace=True)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, write_only=True, trim_whitespace=False)


class UserSerializer(serializers.Serializer):
    """Public view of a user."""

    id = serializers.CharField()
    name = serializers.CharField()
    email = serializers.EmailField()
    createdAt = serializers.DateTimeField(source="created_at")
