"""Tests for environment-driven service configuration."""

import pytest

from iam_platform.utils.config import DEFAULT_AUTH_URL, ConfigManager, ServiceConfig

ENV_SUFFIXES = ("AUTH_TYPE", "APIKEY", "BEARER_TOKEN", "URL", "AUTH_URL", "REQUEST_TIMEOUT")


@pytest.fixture
def clean_env(monkeypatch):
    for suffix in ENV_SUFFIXES:
        monkeypatch.delenv(f"IAM_POLICY_MANAGEMENT_{suffix}", raising=False)
    return monkeypatch


class TestLoadConfig:

    def test_defaults_with_apikey(self, clean_env):
        clean_env.setenv("IAM_POLICY_MANAGEMENT_APIKEY", "key")

        config = ConfigManager.load_config("iam_policy_management")

        assert config == ServiceConfig(service_name="iam_policy_management", apikey="key")
        assert config.auth_type == "iam"
        assert config.auth_url == DEFAULT_AUTH_URL
        assert config.request_timeout == 60
        assert config.url is None

    def test_all_variables(self, clean_env):
        clean_env.setenv("IAM_POLICY_MANAGEMENT_AUTH_TYPE", " BearerToken ")
        clean_env.setenv("IAM_POLICY_MANAGEMENT_BEARER_TOKEN", "tok")
        clean_env.setenv("IAM_POLICY_MANAGEMENT_URL", "https://private.iam.cloud.ibm.com")
        clean_env.setenv("IAM_POLICY_MANAGEMENT_AUTH_URL", "https://iam.test.cloud.ibm.com")
        clean_env.setenv("IAM_POLICY_MANAGEMENT_REQUEST_TIMEOUT", "15")

        config = ConfigManager.load_config("iam_policy_management")

        assert config.auth_type == "bearertoken"
        assert config.bearer_token == "tok"
        assert config.url == "https://private.iam.cloud.ibm.com"
        assert config.auth_url == "https://iam.test.cloud.ibm.com"
        assert config.request_timeout == 15

    def test_missing_apikey(self, clean_env):
        with pytest.raises(ValueError, match="Missing required environment variable: IAM_POLICY_MANAGEMENT_APIKEY"):
            ConfigManager.load_config("iam_policy_management")

    def test_noauth_needs_no_credentials(self, clean_env):
        clean_env.setenv("IAM_POLICY_MANAGEMENT_AUTH_TYPE", "noauth")
        assert ConfigManager.load_config("iam_policy_management").auth_type == "noauth"

    def test_non_integer_timeout(self, clean_env):
        clean_env.setenv("IAM_POLICY_MANAGEMENT_APIKEY", "key")
        clean_env.setenv("IAM_POLICY_MANAGEMENT_REQUEST_TIMEOUT", "soon")

        with pytest.raises(ValueError, match="must be an integer"):
            ConfigManager.load_config("iam_policy_management")

    def test_env_prefix(self):
        assert ConfigManager.env_prefix("iam-access-groups") == "IAM_ACCESS_GROUPS"
        assert ServiceConfig("iam_policy_management").env_prefix == "IAM_POLICY_MANAGEMENT"


class TestValidateConfig:

    def test_invalid_auth_type(self):
        with pytest.raises(ValueError, match="Invalid auth type"):
            ConfigManager.validate_config(ServiceConfig("svc", auth_type="basic"))

    @pytest.mark.parametrize("timeout", [0, 301, -5])
    def test_timeout_range(self, timeout):
        with pytest.raises(ValueError, match="between 1 and 300"):
            ConfigManager.validate_config(ServiceConfig("svc", apikey="k", request_timeout=timeout))

    def test_url_must_be_http(self):
        with pytest.raises(ValueError, match="SVC_URL must be an http"):
            ConfigManager.validate_config(ServiceConfig("svc", apikey="k", url="iam.cloud.ibm.com"))

    def test_valid(self):
        ConfigManager.validate_config(ServiceConfig("svc", apikey="k", url="https://iam.cloud.ibm.com"))


class TestMissingVariables:

    def test_reports_apikey(self, clean_env):
        assert ConfigManager.missing_variables("iam_policy_management") == ["IAM_POLICY_MANAGEMENT_APIKEY"]

    def test_reports_bearer_token(self, clean_env):
        clean_env.setenv("IAM_POLICY_MANAGEMENT_AUTH_TYPE", "bearertoken")
        assert ConfigManager.missing_variables("iam_policy_management") == ["IAM_POLICY_MANAGEMENT_BEARER_TOKEN"]

    def test_nothing_missing(self, clean_env):
        clean_env.setenv("IAM_POLICY_MANAGEMENT_APIKEY", "key")
        assert ConfigManager.missing_variables("iam_policy_management") == []

    def test_describe_hides_credentials(self):
        summary = ConfigManager.describe(ServiceConfig("svc", apikey="secret", bearer_token="secret"))
        assert "secret" not in summary.values()
        assert summary["auth_type"] == "iam"
