"""AppConfig + load_app_config 单元测试

验证环境变量映射、默认值与非法值处理。
"""

import pytest
from pydantic import SecretStr, ValidationError
from tasktracker.core.config import (
    DEFAULT_WRITE_TIMEOUT_S,
    AppConfig,
    ConfigError,
    RestConfig,
    load_app_config,
    parse_duration,
)

_ENV_VARS = [
    "TASKTRACKER_HOST",
    "TASKTRACKER_PORT",
    "TASKTRACKER_WRITE_TIMEOUT",
    "TASKTRACKER_SERVER_NAME",
    "TASKTRACKER_TOKEN",
    "TASKTRACKER_LOG_LEVEL",
    "TASKTRACKER_LOG_FORMAT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAppConfig:
    def test_default_values(self):
        config = AppConfig()
        assert config.log_level == "INFO"
        assert config.log_format == "dev"
        assert config.rest.port == 8080
        assert config.rest.write_timeout_s == DEFAULT_WRITE_TIMEOUT_S
        assert config.rest.server_name == "tasktracker"
        assert config.rest.auth_enabled is False

    def test_auth_enabled_with_token(self):
        rest = RestConfig(token=SecretStr("s3cret"))
        assert rest.auth_enabled is True
        assert "s3cret" not in repr(rest)

    def test_port_range(self):
        with pytest.raises(ValidationError):
            RestConfig(port=0)
        with pytest.raises(ValidationError):
            RestConfig(port=70000)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            RestConfig(write_timeout_s=0)


class TestParseDuration:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("10", 10.0), ("10s", 10.0), ("1.5s", 1.5), ("500ms", 0.5), ("2m", 120.0)],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", ["", "abc", "10h", "-5s", "0"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestLoadAppConfig:
    def test_default_when_no_env(self, clean_env):
        config = load_app_config()
        assert config == AppConfig()

    def test_all_values_from_env(self, clean_env):
        clean_env.setenv("TASKTRACKER_HOST", "127.0.0.1")
        clean_env.setenv("TASKTRACKER_PORT", "9000")
        clean_env.setenv("TASKTRACKER_WRITE_TIMEOUT", "15s")
        clean_env.setenv("TASKTRACKER_SERVER_NAME", "tasks-api")
        clean_env.setenv("TASKTRACKER_TOKEN", "tok")
        clean_env.setenv("TASKTRACKER_LOG_LEVEL", "debug")
        clean_env.setenv("TASKTRACKER_LOG_FORMAT", "json")

        config = load_app_config()

        assert config.rest.host == "127.0.0.1"
        assert config.rest.port == 9000
        assert config.rest.write_timeout_s == 15.0
        assert config.rest.server_name == "tasks-api"
        assert config.rest.token.get_secret_value() == "tok"
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_invalid_port_raises(self, clean_env):
        clean_env.setenv("TASKTRACKER_PORT", "http")
        with pytest.raises(ConfigError):
            load_app_config()

    def test_out_of_range_port_raises(self, clean_env):
        clean_env.setenv("TASKTRACKER_PORT", "99999")
        with pytest.raises(ConfigError):
            load_app_config()

    def test_invalid_timeout_falls_back(self, clean_env):
        clean_env.setenv("TASKTRACKER_WRITE_TIMEOUT", "soon")
        config = load_app_config()
        assert config.rest.write_timeout_s == DEFAULT_WRITE_TIMEOUT_S

    def test_invalid_log_format_falls_back(self, clean_env):
        clean_env.setenv("TASKTRACKER_LOG_FORMAT", "xml")
        config = load_app_config()
        assert config.log_format == "dev"
