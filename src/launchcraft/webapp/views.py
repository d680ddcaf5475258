"""API views for LaunchCraft."""

from typing import Optional

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from launchcraft.core.accounts import AccountService
from launchcraft.core.config import Config
from launchcraft.core.errors import (
    ConfigurationError,
    DuplicateEmailError,
    GenerationError,
    ProjectValidationError,
)
from launchcraft.core.generation_client import CopyGenerator
from launchcraft.core.logging import get_logger
from launchcraft.webapp.serializers import (
    GenerateRequestSerializer,
    GenerateResultSerializer,
    RegisterRequestSerializer,
    UserSerializer,
)
from launchcraft.webapp.services import LaunchCraftService

logger = get_logger("launchcraft.webapp")


class GenerateView(APIView):
    """
    POST /generate: validate a project description and generate copy.

    `client` and `config` can be injected through as_view(); otherwise they
    are built from Config.load() on each request.
    """

    client: Optional[CopyGenerator] = None
    config: Optional[Config] = None

    def post(self, request):
        serializer = GenerateRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Missing or invalid parameters", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = serializer.validated_data
        config = self.config or LaunchCraftService.get_config()
        pipeline = LaunchCraftService.create_pipeline(config, client=self.client)

        try:
            result = pipeline.run(data["projectData"], data["type"])
        except ProjectValidationError as e:
            return Response(
                {"error": "Invalid project data", "details": [err.to_dict() for err in e.errors]},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except ConfigurationError as e:
            logger.error(f"Generation unavailable: {e.message}", context={"error_kind": e.kind})
            return Response(e.to_dict(), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        except GenerationError as e:
            logger.error(
                f"Generation failed: {e.message}",
                context={"error_kind": e.kind, "status_code": e.status_code, "type": data["type"]},
            )
            return Response(e.to_dict(), status=e.status_code)

        response_serializer = GenerateResultSerializer(
            {
                "success": True,
                "type": result.kind.value,
                "data": result.data.to_wire(),
                "usage": result.usage,
            }
        )
        return Response(response_serializer.data, status=status.HTTP_200_OK)


class RegisterView(APIView):
    """POST /register: create an account. `accounts` can be injected through as_view()."""

    accounts: Optional[AccountService] = None

    def post(self, request):
        serializer = RegisterRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Invalid input data", "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        data = serializer.validated_data
        accounts = self.accounts or LaunchCraftService.create_account_service(
            LaunchCraftService.get_config()
        )

        try:
            user = accounts.register(data["name"], data["email"], data["password"])
        except DuplicateEmailError:
            return Response(
                {"error": "This email is already registered"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(
            {"user": UserSerializer(user).data, "message": "Registration successful"},
            status=status.HTTP_200_OK,
        )
