from bubbles_cafe.core import initialization
from bubbles_cafe.core.config.app import AppSettings

SECRET = "x" * 32


def test_allowed_origins_split_from_comma_separated_env_value():
    app_settings = AppSettings(SECRET_KEY=SECRET, ALLOWED_ORIGINS="https://cafe.example, https://admin.cafe.example,")

    assert app_settings.ALLOWED_ORIGINS == ["https://cafe.example", "https://admin.cafe.example"]


def test_allowed_origins_default_is_local_storefront():
    app_settings = AppSettings(SECRET_KEY=SECRET)

    assert app_settings.ALLOWED_ORIGINS == ["http://localhost:3002"]


def test_initialize_application_loads_env_then_configures_logging(mocker):
    load_dotenv = mocker.patch.object(initialization, "load_dotenv")
    configure_logging = mocker.patch.object(initialization, "configure_logging")

    initialization.initialize_application()

    load_dotenv.assert_called_once_with(override=True)
    configure_logging.assert_called_once_with(
        log_level=initialization.settings.LOG_LEVEL,
        json_logs=initialization.settings.LOG_JSON,
    )
