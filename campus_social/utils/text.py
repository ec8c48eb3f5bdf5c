# campus_social/utils/text.py
from __future__ import annotations
import re, unicodedata
from typing import Dict, Iterable, List
from unidecode import unidecode
from better_profanity import profanity

profanity.load_censor_words()

LEET = str.maketrans({"0":"o","1":"i","!":"i","3":"e","4":"a","@":"a","5":"s","7":"t","$":"s","8":"b"})
HASHTAG_RE = re.compile(r"#(\w{1,50})", re.UNICODE)

def _normalize(text: str) -> str:
    t = unidecode(unicodedata.normalize("NFKD", (text or "").lower()))
    t = t.translate(LEET)
    t = re.sub(r"(.)\1{2,}", r"\1\1", t)        # cooool -> cool
    t = re.sub(r"[^a-z0-9\s]", "", t)
    return re.sub(r"\s+", " ", t).strip()

def moderate_text(text: str | None) -> Dict:
    """
    {"cleaned": censored text, "flagged": bool}.

    `flagged` is checked on the normalised text, so it also catches
    accented or leetspeak spellings the censor lets through.
    """
    text = (text or "").strip()
    if not text:
        return {"cleaned": "", "flagged": False}
    flagged = profanity.contains_profanity(_normalize(text))
    return {"cleaned": profanity.censor(text, censor_char="*"), "flagged": flagged}

def clean(text: str | None) -> str:
    """Trimmed, profanity-censored user text ("" for None)."""
    return moderate_text(text)["cleaned"]

def normalize_tag(tag: str) -> str:
    return (tag or "").strip().lstrip("#").lower()

def extract_hashtags(*texts: str, extra: Iterable[str] = ()) -> List[str]:
    """Lowercased hashtags (without '#') from texts plus explicit tags, first-seen order."""
    seen: List[str] = []
    found = [m for t in texts for m in HASHTAG_RE.findall(t or "")]
    for raw in list(found) + list(extra or []):
        tag = normalize_tag(raw)
        if tag and tag not in seen:
            seen.append(tag)
    return seen

def search_regex(q: str) -> Dict:
    """Case-insensitive contains-match on the literal query."""
    return {"$regex": re.escape(q.strip()), "$options": "i"}
