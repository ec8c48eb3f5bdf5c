from campus_social.utils.text import clean, extract_hashtags, moderate_text, normalize_tag, search_regex


def test_extract_hashtags_dedupes_and_lowercases():
    assert extract_hashtags("Go #Team go #team", "#Finals", extra=["#team", "campus"]) == ["team", "finals", "campus"]


def test_normalize_tag():
    assert normalize_tag("  #CodeJam ") == "codejam"
    assert normalize_tag("") == ""


def test_clean_trims_and_handles_none():
    assert clean(None) == ""
    assert clean("  hello campus  ") == "hello campus"


def test_search_regex_escapes_metacharacters():
    rx = search_regex(" a+b ")
    assert rx == {"$regex": r"a\+b", "$options": "i"}


def test_moderate_text_flags_obfuscated_profanity():
    assert moderate_text("what the sh1t")["flagged"] is True
    assert moderate_text("what the $h!t")["flagged"] is True
    assert moderate_text("See you at the fest") == {"cleaned": "See you at the fest", "flagged": False}
    assert moderate_text(None) == {"cleaned": "", "flagged": False}
