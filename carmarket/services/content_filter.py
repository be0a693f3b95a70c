# carmarket/services/content_filter.py
import re
from dataclasses import dataclass

from carmarket.utils.settings import BANNED_WORDS, MESSAGE_MAX_LENGTH

PROFANITY = (
    "блядь", "сука", "пизда", "хуй", "ебать", "гавно", "говно", "дерьмо",
    "козел", "козёл", "дебил", "идиот", "тварь", "уебан", "уёбан",
    "мразь", "гнида", "падла", "сволочь", "ублюдок", "мудак", "дурак",
)

POLITICAL_TOPICS = (
    "путин", "зеленский", "biden", "украина", "россия",
    "война", "санкции", "политика", "выборы", "президент",
)

ETHNIC_SLURS = (
    "хохол", "москаль", "русня", "укроп", "ватник", "бандера",
    "кацап", "америкос", "пиндос", "негр", "азиат",
)

# contacts and links move the deal out of the marketplace chat
LINK_MARKERS = (
    "http://", "https://", "www.", ".com", ".ru", ".ua", ".org",
    "telegram", "whatsapp", "viber", "skype", "+7", "+380", "+1",
)

REPEATED_CHAR_RE = re.compile(r"(.)\1{4,}")


@dataclass
class FilterResult:
    allowed: bool
    content: str
    reason: str | None = None


def check_message(
    content: str,
    banned_words=BANNED_WORDS,
    max_length: int = MESSAGE_MAX_LENGTH,
) -> FilterResult:
    text = content.strip()
    lowered = text.lower()

    if not text:
        return FilterResult(False, text, "empty message")

    # the first category that matches names the reason
    word_checks = (
        (PROFANITY + tuple(banned_words), "inappropriate language"),
        (POLITICAL_TOPICS, "political topics are not allowed"),
        (ETHNIC_SLURS, "ethnic hatred is not allowed"),
    )
    for words, reason in word_checks:
        if any(word in lowered for word in words):
            return FilterResult(False, text, reason)

    for marker in LINK_MARKERS:
        if marker in lowered:
            return FilterResult(False, text, "links and contacts are not allowed in chat")

    if REPEATED_CHAR_RE.search(lowered):
        return FilterResult(False, text, "spam is not allowed")

    if len(text) > max_length:
        return FilterResult(False, text, f"message is too long (max {max_length} characters)")

    return FilterResult(True, text)
