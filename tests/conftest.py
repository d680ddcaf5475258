"""Shared fixtures. Django is configured here so the web views and password hashing work."""

import os

import django
import pytest
from openai.types.chat import ChatCompletion

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "launchcraft.webapp.settings")
os.environ.setdefault("LAUNCHCRAFT_SECRET_KEY", "launchcraft-test-secret-key")
os.environ.setdefault("LAUNCHCRAFT_ALLOWED_HOSTS", "testserver,localhost")
django.setup()

from launchcraft.core.validator import validate_project  # noqa: E402

ENV_VARS_TO_CLEAR = [
    "OPENAI_API_KEY",
    "OPENROUTER_API_KEY",
    "OPENAI_BASE_URL",
    "LAUNCHCRAFT_PROVIDER",
    "LAUNCHCRAFT_MODEL",
    "LAUNCHCRAFT_DATA_DIR",
    "LAUNCHCRAFT_LOG_LEVEL",
    "LAUNCHCRAFT_MAX_RETRIES",
]


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point HOME and the working directory at tmp_path and drop provider variables."""
    home = tmp_path / "home"
    workdir = tmp_path / "work"
    home.mkdir()
    workdir.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(workdir)
    for name in ENV_VARS_TO_CLEAR:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def project_data():
    """Valid project description in wire format."""
    return {
        "concept": "A journaling app that turns three-minute daily notes into a weekly mood report",
        "coreFunctions": ["Quick daily notes", "Mood tagging", "Weekly report"],
        "category": "lifestyle",
        "brandTone": "friendly",
        "targetAudience": {
            "ageRange": "25-34",
            "gender": "all",
            "interests": ["閱讀", "健康"],
        },
        "uniqueSellingPoints": "Private by default, no account needed",
        "pricingModel": "freemium",
    }


@pytest.fixture
def project_description(project_data):
    return validate_project(project_data)


@pytest.fixture
def app_name_payload():
    return {
        "names": ["晨光筆記", "心情日和", "三分鐘日記", "Lumi Notes", "日日心晴"],
        "subtitle": "每天三分鐘，看見自己的心情",
    }


@pytest.fixture
def full_listing_payload(app_name_payload):
    return {
        **app_name_payload,
        "description": "用三分鐘記下今天。" * 120,
        "highlights": ["快速記錄", "心情標籤", "每週報告"],
        "keywords": ["日記", "心情", "筆記"],
        "totalLength": 8,
        "texts": ["今天就開始記錄", "看見你的情緒變化", "免費下載"],
    }


@pytest.fixture
def make_completion():
    """Build a real ChatCompletion object as returned by the OpenAI SDK."""

    def _make(content, model="gpt-4-turbo-preview", usage=None):
        usage = usage if usage is not None else {
            "prompt_tokens": 420,
            "completion_tokens": 180,
            "total_tokens": 600,
        }
        data = {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 1700000000,
            "model": model,
            "choices": [
                {
                    "index": 0,
                    "finish_reason": "stop",
                    "message": {"role": "assistant", "content": content},
                }
            ],
        }
        if usage:
            data["usage"] = usage
        return ChatCompletion.model_validate(data)

    return _make
