"""Tests for the HTTP API views."""

import json
from unittest.mock import MagicMock, patch

import pytest
from django.test import override_settings
from rest_framework.test import APIClient, APIRequestFactory

from launchcraft.core.accounts import AccountService, InMemoryUserRepository
from launchcraft.core.config import Config
from launchcraft.core.errors import (
    ConfigurationError,
    EmptyResponseError,
    ProviderError,
    SchemaMismatchError,
)
from launchcraft.core.generation_client import GenerationClient
from launchcraft.schemas.account import User
from launchcraft.webapp.serializers import UserSerializer
from launchcraft.webapp.views import GenerateView, RegisterView

FAST_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


@pytest.fixture
def factory():
    return APIRequestFactory()


@pytest.fixture
def config():
    config = Config()
    config.api_key = "sk-test"
    return config


@pytest.fixture
def sdk():
    return MagicMock()


@pytest.fixture
def generate_view(sdk, config):
    client = GenerationClient(api_key="sk-test", client=sdk)
    return GenerateView.as_view(client=client, config=config)


def _post(factory, view, path, body):
    request = factory.post(path, body, format="json")
    return view(request)


class TestGenerateView:
    """Test POST /generate."""

    def test_success(self, factory, generate_view, sdk, project_data, make_completion, app_name_payload):
        sdk.chat.completions.create.return_value = make_completion(json.dumps(app_name_payload))

        response = _post(factory, generate_view, "/generate", {"type": "app_name", "projectData": project_data})

        assert response.status_code == 200
        assert response.data["success"] is True
        assert response.data["type"] == "app_name"
        assert response.data["data"] == app_name_payload
        assert response.data["usage"]["total_tokens"] == 600

    def test_keywords_wire_names(self, factory, generate_view, sdk, project_data, make_completion):
        payload = {"keywords": ["日記", "心情"], "totalLength": 5}
        sdk.chat.completions.create.return_value = make_completion(json.dumps(payload))

        response = _post(factory, generate_view, "/generate", {"type": "keywords", "projectData": project_data})

        assert response.status_code == 200
        assert response.data["data"] == payload

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"type": "app_name"},
            {"projectData": {}},
            {"type": "haiku", "projectData": {}},
        ],
    )
    def test_missing_or_unknown_parameters(self, factory, generate_view, sdk, body):
        response = _post(factory, generate_view, "/generate", body)

        assert response.status_code == 400
        assert set(response.data) == {"error", "details"}
        sdk.chat.completions.create.assert_not_called()

    def test_invalid_project_data(self, factory, generate_view, sdk, project_data):
        project_data["concept"] = "too short"
        project_data["coreFunctions"] = []

        response = _post(factory, generate_view, "/generate", {"type": "app_name", "projectData": project_data})

        assert response.status_code == 400
        fields = {item["field"] for item in response.data["details"]}
        assert fields == {"concept", "coreFunctions"}
        sdk.chat.completions.create.assert_not_called()

    def test_project_data_not_an_object(self, factory, generate_view):
        response = _post(factory, generate_view, "/generate", {"type": "app_name", "projectData": "text"})

        assert response.status_code == 400
        assert response.data["details"][0]["field"] == "projectData"

    def test_missing_api_key(self, factory, sdk, project_data):
        view = GenerateView.as_view(client=GenerationClient(api_key=None, client=sdk), config=Config())

        response = _post(factory, view, "/generate", {"type": "keywords", "projectData": project_data})

        assert response.status_code == 500
        assert response.data == {"error": "provider not configured", "kind": "configuration_error"}
        sdk.chat.completions.create.assert_not_called()

    def test_empty_provider_response(self, factory, generate_view, sdk, project_data, make_completion):
        sdk.chat.completions.create.return_value = make_completion(None)

        response = _post(factory, generate_view, "/generate", {"type": "app_name", "projectData": project_data})

        assert response.status_code == 500
        assert response.data["error"] == "no valid response received"
        assert response.data["kind"] == "empty_response"

    @pytest.mark.parametrize(
        "error,status_code,kind",
        [
            (ProviderError(429, "Rate limit reached"), 429, "provider_error"),
            (ProviderError(401, "Invalid API key"), 401, "provider_error"),
            (ProviderError(None, "Connection reset"), 500, "provider_error"),
            (SchemaMismatchError("Response does not match AppNameCopy"), 500, "schema_mismatch"),
            (EmptyResponseError("Provider returned an empty response"), 500, "empty_response"),
            (ConfigurationError("No API key"), 500, "configuration_error"),
        ],
    )
    def test_error_mapping(self, factory, config, project_data, error, status_code, kind):
        failing = MagicMock()
        failing.generate.side_effect = error
        view = GenerateView.as_view(client=failing, config=config)

        response = _post(factory, view, "/generate", {"type": "app_name", "projectData": project_data})

        assert response.status_code == status_code
        assert response.data["kind"] == kind

    def test_rate_limit_body(self, factory, config, project_data):
        failing = MagicMock()
        failing.generate.side_effect = ProviderError(429, "Rate limit reached")
        view = GenerateView.as_view(client=failing, config=config)

        response = _post(factory, view, "/generate", {"type": "all", "projectData": project_data})

        assert response.data == {
            "error": "generation failed",
            "message": "Rate limit reached",
            "code": 429,
            "kind": "provider_error",
            "retryable": True,
        }

    @pytest.mark.parametrize("interests", [["閱讀", "健康"], ["科技", "遊戲", "投資", "環保", "社交"]])
    def test_form_interest_values_accepted(self, factory, generate_view, sdk, project_data, make_completion, interests):
        project_data["targetAudience"]["interests"] = interests
        payload = {"keywords": ["日記", "心情"], "totalLength": 5}
        sdk.chat.completions.create.return_value = make_completion(json.dumps(payload))

        response = _post(factory, generate_view, "/generate", {"type": "keywords", "projectData": project_data})

        assert response.status_code == 200
        user_message = sdk.chat.completions.create.call_args.kwargs["messages"][-1]["content"]
        assert "、".join(interests) in user_message

    def test_strict_interests_follows_config(self, factory, sdk, project_data, make_completion):
        project_data["targetAudience"]["interests"] = ["knitting"]
        sdk.chat.completions.create.return_value = make_completion('{"whatsNew": "Bug fixes"}')
        config = Config()
        config.strict_interests = False
        view = GenerateView.as_view(client=GenerationClient(api_key="sk-test", client=sdk), config=config)

        response = _post(factory, view, "/generate", {"type": "whats_new", "projectData": project_data})

        assert response.status_code == 200
        assert response.data["data"] == {"whatsNew": "Bug fixes"}

    def test_default_collaborators_from_config(self, factory, project_data):
        """Test that without injection the view builds its client from Config.load()."""
        config = Config()
        with patch("launchcraft.webapp.views.LaunchCraftService.get_config", return_value=config):
            response = _post(
                factory, GenerateView.as_view(), "/generate", {"type": "app_name", "projectData": project_data}
            )

        assert response.status_code == 500
        assert response.data["kind"] == "configuration_error"


class TestCors:
    """Test CORS handling on /generate."""

    def test_preflight(self):
        response = APIClient().options(
            "/generate",
            HTTP_ORIGIN="http://localhost:3000",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
            HTTP_ACCESS_CONTROL_REQUEST_HEADERS="content-type",
        )

        assert response.status_code == 200
        assert response["Access-Control-Allow-Origin"] == "*"
        assert response["Access-Control-Allow-Methods"] == "POST, OPTIONS"
        assert response["Access-Control-Allow-Headers"] == "content-type"

    def test_get_not_allowed(self):
        assert APIClient().get("/generate").status_code == 405


class TestRegisterView:
    """Test POST /register."""

    @pytest.fixture(autouse=True)
    def fast_hashing(self):
        with override_settings(PASSWORD_HASHERS=FAST_HASHERS):
            yield

    @pytest.fixture
    def users(self):
        return InMemoryUserRepository()

    @pytest.fixture
    def register_view(self, users):
        return RegisterView.as_view(accounts=AccountService(users))

    def test_register(self, factory, register_view, users):
        body = {"name": "Mei Lin", "email": "mei@example.com", "password": "secret123"}

        response = _post(factory, register_view, "/register", body)

        assert response.status_code == 200
        assert response.data["message"] == "Registration successful"
        user = response.data["user"]
        assert set(user) == {"id", "name", "email", "createdAt"}
        assert user["email"] == "mei@example.com"
        assert "secret123" not in json.dumps(response.data)
        assert len(users) == 1

    def test_user_serializer_omits_password_hash(self):
        user = User(name="Mei Lin", email="mei@example.com", password_hash="md5$salt$hash")
        data = UserSerializer(user).data
        assert set(data) == {"id", "name", "email", "createdAt"}
        assert data["email"] == "mei@example.com"

    def test_duplicate_email(self, factory, register_view):
        body = {"name": "Mei Lin", "email": "mei@example.com", "password": "secret123"}
        _post(factory, register_view, "/register", body)

        response = _post(factory, register_view, "/register", body)

        assert response.status_code == 400
        assert "already registered" in response.data["error"]

    @pytest.mark.parametrize(
        "body,field",
        [
            ({"name": "M", "email": "mei@example.com", "password": "secret123"}, "name"),
            ({"name": "Mei Lin", "email": "not-an-email", "password": "secret123"}, "email"),
            ({"name": "Mei Lin", "email": "mei@example.com", "password": "12345"}, "password"),
        ],
    )
    def test_invalid_input(self, factory, register_view, users, body, field):
        response = _post(factory, register_view, "/register", body)

        assert response.status_code == 400
        assert field in response.data["details"]
        assert len(users) == 0
