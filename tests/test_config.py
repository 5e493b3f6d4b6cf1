import pytest

from minirdbms.config import Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings == Settings()
    assert settings.strict_updates is False
    assert settings.history_limit is None
    assert settings.port == 8000


def test_from_env():
    settings = Settings.from_env({
        "MINIRDBMS_STRICT_UPDATES": "yes",
        "MINIRDBMS_HISTORY_LIMIT": "50",
        "MINIRDBMS_LOAD_SAMPLE": "1",
        "MINIRDBMS_HOST": "0.0.0.0",
        "MINIRDBMS_PORT": "9000",
    })
    assert settings == Settings(
        strict_updates=True, history_limit=50, load_sample=True, host="0.0.0.0", port=9000,
    )


def test_false_words_and_blanks():
    settings = Settings.from_env({"MINIRDBMS_STRICT_UPDATES": "off", "MINIRDBMS_HISTORY_LIMIT": " "})
    assert settings.strict_updates is False
    assert settings.history_limit is None


def test_invalid_integer():
    with pytest.raises(ValueError, match="MINIRDBMS_PORT"):
        Settings.from_env({"MINIRDBMS_PORT": "eighty"})
