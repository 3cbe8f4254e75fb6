"""
Tests for environment-driven settings
"""
from cart_client.core.config import Settings as ClientSettings
from cart_service.core.config import Settings as ServiceSettings


class TestClientSettings:

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)

        settings = ClientSettings()

        assert settings.api_base_url == "http://localhost:3000/api"
        assert settings.request_timeout == 10.0
        assert settings.cart_storage_key == "storefront:cart"

    def test_prefixed_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("STOREFRONT_REQUEST_TIMEOUT", "3.5")
        monkeypatch.setenv("storefront_api_base_url", "http://cart.internal/api")

        settings = ClientSettings()

        assert settings.request_timeout == 3.5
        assert settings.api_base_url == "http://cart.internal/api"

    def test_env_file_shared_with_service(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("JWT_SECRET", raising=False)
        monkeypatch.delenv("STOREFRONT_MAX_RETRIES", raising=False)
        (tmp_path / ".env").write_text("JWT_SECRET=abc\nSTOREFRONT_MAX_RETRIES=0\n")

        assert ClientSettings().max_retries == 0
        assert ServiceSettings().jwt_secret == "abc"


class TestServiceSettings:

    def test_auth_configured_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("JWT_SECRET", raising=False)
        assert not ServiceSettings().auth_configured

        monkeypatch.setenv("JWT_SECRET", "secret")
        assert ServiceSettings().auth_configured

    def test_public_key_from_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        key_path = tmp_path / "jwt_public.pem"
        key_path.write_text("-----BEGIN PUBLIC KEY-----\n...")

        settings = ServiceSettings(jwt_public_key_path=str(key_path))

        assert settings.get_jwt_public_key().startswith("-----BEGIN PUBLIC KEY-----")
