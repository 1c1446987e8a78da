from radio_export.config import Settings
from radio_export.services.materializer import DEFAULT_AD_PLATFORMS


def test_ad_platforms_parse_from_comma_string():
    settings = Settings(_env_file=None, AD_PLATFORMS="iOS, Home Assistant, ios")
    assert settings.ad_platforms == ("ios", "homeassistant")


def test_ad_platforms_blank_falls_back_to_default():
    settings = Settings(_env_file=None, AD_PLATFORMS=" , ")
    assert settings.ad_platforms == DEFAULT_AD_PLATFORMS


def test_default_network_code_is_stripped():
    settings = Settings(_env_file=None, DEFAULT_NETWORK_CODE=" 1234567 ")
    assert settings.default_network_code == "1234567"


def test_log_level_is_upper_cased():
    settings = Settings(_env_file=None, LOG_LEVEL="debug")
    assert settings.log_level == "DEBUG"
