import pytest

from exetranslate.configuration import _load_config_instance, get_settings, resolve_delimiter
from exetranslate.errors import ConfigurationError


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    for key in (
        "EXETRANSLATE_SECTION",
        "EXETRANSLATE_OUTPUT_SUFFIX",
        "EXETRANSLATE_ALLOW_UNSAFE_GROWTH",
        "EXETRANSLATE_TABLE_DELIMITER",
        "EXETRANSLATE_TABLE_ENCODING",
    ):
        monkeypatch.delenv(key, raising=False)
    _load_config_instance.cache_clear()
    yield
    _load_config_instance.cache_clear()


def test_defaults_without_any_source(tmp_path):
    settings = get_settings(app_dir=tmp_path)

    assert settings.EXETRANSLATE_SECTION == ".rdata"
    assert settings.EXETRANSLATE_OUTPUT_SUFFIX == ".translated"
    assert settings.EXETRANSLATE_ALLOW_UNSAFE_GROWTH is False
    assert settings.EXETRANSLATE_TABLE_DELIMITER == ","
    assert settings.EXETRANSLATE_TABLE_ENCODING == "utf-8-sig"


def test_dotenv_values_are_merged(tmp_path):
    (tmp_path / ".env").write_text(
        "EXETRANSLATE_SECTION=.data\n"
        "EXETRANSLATE_ALLOW_UNSAFE_GROWTH=true\n"
        "EXETRANSLATE_TABLE_DELIMITER=tab\n"
    )

    settings = get_settings(app_dir=tmp_path)

    assert settings.EXETRANSLATE_SECTION == ".data"
    assert settings.EXETRANSLATE_ALLOW_UNSAFE_GROWTH is True
    assert settings.EXETRANSLATE_TABLE_DELIMITER == "\t"


def test_process_environment_overrides_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("EXETRANSLATE_SECTION=.data\n")
    monkeypatch.setenv("EXETRANSLATE_SECTION", ".text")

    assert get_settings(app_dir=tmp_path).EXETRANSLATE_SECTION == ".text"


def test_multi_character_delimiter_is_rejected(tmp_path, monkeypatch):
    monkeypatch.setenv("EXETRANSLATE_TABLE_DELIMITER", "::")

    with pytest.raises(ConfigurationError):
        get_settings(app_dir=tmp_path)


@pytest.mark.parametrize(
    "value, expected",
    [("tab", "\t"), (" Tab ", "\t"), ("\\t", "\t"), ("comma", ","), ("semicolon", ";"), ("|", "|")],
)
def test_resolve_delimiter_names(value, expected):
    assert resolve_delimiter(value) == expected


@pytest.mark.parametrize("value", [";;", "pipe", ""])
def test_resolve_delimiter_rejects_non_characters(value):
    with pytest.raises(ConfigurationError):
        resolve_delimiter(value)
