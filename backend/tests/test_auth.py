"""
API Key 鉴权与 auth-key 接口测试
"""
import importlib.util
import os

import pytest
from fastapi import status
from starlette.requests import Request

from participation.config.dependency_injection import api_key_auth
from participation.core.config import Settings, settings
from participation.core.exceptions import AuthenticationError
from participation.main import app
from participation.middleware.auth import (
    APIKeyAuth,
    AuthConfig,
    generate_api_key,
    generate_api_keys,
    is_from_trusted_origin,
)

VALID_KEY = "a" * 64
FRONTEND = "https://participation-app.vercel.app"


def _request(method="GET", headers=None):
    scope = {
        "type": "http",
        "method": method,
        "path": "/api/participants",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }
    return Request(scope)


@pytest.fixture
def production_auth():
    return APIKeyAuth(AuthConfig(allowed_keys=[VALID_KEY], require_auth=True))


class TestAPIKeyAuth:
    def test_disabled_outside_production(self):
        auth = APIKeyAuth(AuthConfig(allowed_keys=[VALID_KEY], require_auth=False))
        assert auth(_request()) is None

    def test_missing_key(self, production_auth):
        with pytest.raises(AuthenticationError) as exc_info:
            production_auth(_request())
        assert exc_info.value.to_dict() == {
            "error": "Authentication required",
            "message": "Missing X-API-Key header",
        }

    def test_invalid_key(self, production_auth):
        with pytest.raises(AuthenticationError) as exc_info:
            production_auth(_request(headers={"X-API-Key": "wrong"}))
        assert exc_info.value.to_dict() == {
            "error": "Authentication failed",
            "message": "Invalid API key",
        }

    def test_valid_key(self, production_auth):
        assert production_auth(_request(headers={"X-API-Key": VALID_KEY})) is None

    def test_options_is_not_challenged(self, production_auth):
        assert production_auth(_request(method="OPTIONS")) is None

    def test_trusted_origin_bypass_is_opt_in(self):
        without_trust = APIKeyAuth(AuthConfig(allowed_keys=[VALID_KEY], require_auth=True))
        with pytest.raises(AuthenticationError):
            without_trust(_request(headers={"Origin": FRONTEND}))

        with_trust = APIKeyAuth(AuthConfig(allowed_keys=[VALID_KEY], require_auth=True, trusted_origin=FRONTEND))
        assert with_trust(_request(headers={"Origin": FRONTEND})) is None
        assert with_trust(_request(headers={"Referer": f"{FRONTEND}/edit/1"})) is None

    @pytest.mark.parametrize("headers", [
        {"Origin": "https://participation-app.vercel.app.evil.net"},
        {"Origin": "http://participation-app.vercel.app"},
        {"Referer": "https://evil.example.com/?next=https://participation-app.vercel.app"},
        {"Origin": "null"},
    ])
    def test_lookalike_origins_are_not_trusted(self, headers):
        auth = APIKeyAuth(AuthConfig(allowed_keys=[VALID_KEY], require_auth=True, trusted_origin=FRONTEND))
        with pytest.raises(AuthenticationError):
            auth(_request(headers=headers))

    def test_trusted_origin_comparison_ignores_case_and_trailing_slash(self):
        assert is_from_trusted_origin(_request(headers={"Origin": "HTTPS://Participation-App.vercel.app"}), f"{FRONTEND}/")
        assert not is_from_trusted_origin(_request(headers={"Origin": FRONTEND}), None)

    def test_config_from_settings(self):
        config = AuthConfig.from_settings(Settings(ENVIRONMENT="production", API_KEYS="k1, k2"))
        assert config.require_auth is True
        assert config.allowed_keys == ["k1", "k2"]
        assert AuthConfig.from_settings(Settings(ENVIRONMENT="development")).require_auth is False


class TestAuthOnEndpoints:
    def test_participants_require_key_in_production(self, client, production_auth):
        app.dependency_overrides[api_key_auth] = production_auth

        missing = client.get("/api/participants")
        assert missing.status_code == status.HTTP_401_UNAUTHORIZED
        assert missing.json()["error"] == "Authentication required"

        wrong = client.get("/api/participants", headers={"X-API-Key": "wrong"})
        assert wrong.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong.json()["message"] == "Invalid API key"

        ok = client.get("/api/participants", headers={"X-API-Key": VALID_KEY})
        assert ok.status_code == status.HTTP_200_OK

    def test_preflight_skips_auth(self, client, production_auth):
        app.dependency_overrides[api_key_auth] = production_auth
        response = client.options(
            "/api/participants",
            headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
        )
        assert response.status_code == status.HTTP_200_OK


class TestAuthKeyEndpoint:
    def test_not_available_in_development(self, client):
        response = client.get("/api/auth-key")
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"error": "Not available in development"}

    def test_rejects_untrusted_origin(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        monkeypatch.setattr(settings, "TRUSTED_FRONTEND_ORIGIN", FRONTEND)
        response = client.get("/api/auth-key", headers={"Origin": "https://evil.example.com"})
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"error": "Unauthorized origin"}

    def test_keys_not_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        monkeypatch.setattr(settings, "TRUSTED_FRONTEND_ORIGIN", FRONTEND)
        monkeypatch.setattr(settings, "API_KEYS", "")
        response = client.get("/api/auth-key", headers={"Origin": FRONTEND})
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "API keys not configured"}

    def test_returns_first_key(self, client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        monkeypatch.setattr(settings, "TRUSTED_FRONTEND_ORIGIN", FRONTEND)
        monkeypatch.setattr(settings, "API_KEYS", " first-key , second-key")
        response = client.get("/api/auth-key", headers={"Referer": f"{FRONTEND}/add"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"apiKey": "first-key"}


class TestApiKeyGeneration:
    def test_generated_keys_are_random_hex(self):
        keys = generate_api_keys(5)
        assert len(keys) == 5
        assert len(set(keys)) == 5
        for key in keys:
            assert len(key) == 64
            int(key, 16)
        assert len(generate_api_key()) == 64

    def test_script_prints_env_line(self, capsys):
        script_path = os.path.join(os.path.dirname(__file__), "..", "scripts", "generate_api_keys.py")
        spec = importlib.util.spec_from_file_location("generate_api_keys", script_path)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        keys = module.main(["2"])

        output = capsys.readouterr().out
        assert len(keys) == 2
        assert f"API_KEYS={','.join(keys)}" in output


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
