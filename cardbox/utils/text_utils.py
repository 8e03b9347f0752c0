import re
import unicodedata


def normalize_text(text: str) -> str:
    """
    Cleans a string: trim, NFKC unicode, collapsed whitespace.
    """
    if not text:
        return ""
    text = text.strip()
    text = unicodedata.normalize("NFKC", text)
    text = re.sub(r"\s+", " ", text)
    return text


def normalize_question(text: str) -> str:
    """
    Key used for duplicate detection: normalize_text, then casefold.
    """
    return normalize_text(text).casefold()


def contains_keyword(haystack: str, keyword: str) -> bool:
    return keyword.casefold() in (haystack or "").casefold()


def split_csv(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
