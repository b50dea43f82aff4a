import config
from interface.constants import LANG_PACK
from interface.i18n import effective_lang, normalize_lang, translate


def test_english_under_pytest_by_default():
    assert effective_lang() == "en"
    assert translate("STATUS_DELETED", count=2) == "Deleted 2 task(s)"


def test_env_override_and_fallback(monkeypatch):
    monkeypatch.setenv("KLONCH_LANG", "ru")
    assert translate("PROMPT_ADD") == LANG_PACK["ru"]["PROMPT_ADD"]
    # keys the pack lacks were backfilled from English
    assert translate("STATUS_SORTED", sort="due") == "Sorted by due"


def test_sort_strings_accept_the_sort_key():
    assert translate("HEADER_SORT", sort="priority") == "sort: priority"
    assert translate("STATUS_SORTED", sort="title") == "Sorted by title"


def test_locale_style_codes_are_normalized(monkeypatch):
    assert normalize_lang("ru_RU.UTF-8") == "ru"
    assert normalize_lang("EN-us") == "en"
    assert normalize_lang("de") == ""
    assert normalize_lang(None) == ""
    monkeypatch.setenv("KLONCH_LANG", "ru-RU")
    assert effective_lang() == "ru"


def test_unsupported_env_lang_falls_through_to_english(monkeypatch):
    monkeypatch.setenv("KLONCH_LANG", "xx")
    assert effective_lang() == "en"


def test_config_lang_used_outside_pytest(monkeypatch):
    monkeypatch.delenv("PYTEST_CURRENT_TEST", raising=False)
    config.set_user_lang("ru_RU")
    assert effective_lang() == "ru"
    assert effective_lang("en") == "en"


def test_unknown_key_and_bad_format_do_not_raise():
    assert translate("NO_SUCH_KEY") == "NO_SUCH_KEY"
    assert translate("STATUS_DELETED") == LANG_PACK["en"]["STATUS_DELETED"]


def test_every_language_has_every_english_key():
    english = set(LANG_PACK["en"])
    for lang, values in LANG_PACK.items():
        assert english <= set(values), lang
