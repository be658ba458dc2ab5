import logging
import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence

log = logging.getLogger(__name__)

DIGIT_WORDS = {
    "zero": "0",
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
}

DIGIT_WORD_RE = re.compile(r"\b(" + "|".join(DIGIT_WORDS) + r")\b", re.IGNORECASE)
# "3-5-8 1 1-4" -> "358114"
SEPARATED_DIGITS_RE = re.compile(r"[0-9]+(?:[\s\-]+[0-9]+)+")
OTP_DIGITS_RE = re.compile(r"[0-9]{4,8}")

LABELED_RE = re.compile(
    r"\b(?:code|otp|pin|verification)\b\s*[:\-]?\s*([0-9]{4,8})(?![0-9])",
    re.IGNORECASE | re.ASCII,
)
TRAILING_LABEL_RE = re.compile(
    r"\b([0-9]{4,8})(?![0-9])\s*(?:(?:is|as|for)\s+your\s+)?(?:code|otp|pin)\b",
    re.IGNORECASE | re.ASCII,
)
BARE_RE = re.compile(r"\b([0-9]{4,8})\b", re.ASCII)


@dataclass(frozen=True)
class OtpMatcher:
    """One extraction rule; yields the first 4-8 digit capture or None."""
    name: str
    regex: Pattern

    def match(self, text: str) -> Optional[str]:
        for m in self.regex.finditer(text):
            candidate = m.group(1) if m.re.groups else m.group(0)
            if candidate and OTP_DIGITS_RE.fullmatch(candidate):
                return candidate
        return None


DEFAULT_MATCHERS = (
    OtpMatcher("labeled", LABELED_RE),
    OtpMatcher("trailing_label", TRAILING_LABEL_RE),
    OtpMatcher("bare", BARE_RE),
)


def compile_matcher(name: str, pattern: str) -> Optional[OtpMatcher]:
    try:
        return OtpMatcher(name, re.compile(pattern, re.IGNORECASE))
    except re.error as e:
        log.warning("invalid otp pattern name=%s pattern=%r err=%s, ignored", name, pattern, e)
        return None


def normalize_digit_words(text: str) -> str:
    return DIGIT_WORD_RE.sub(lambda m: DIGIT_WORDS[m.group(1).lower()], text)


def collapse_digit_runs(text: str) -> str:
    return SEPARATED_DIGITS_RE.sub(lambda m: re.sub(r"[^0-9]", "", m.group(0)), text)


def normalize_text(text: str) -> str:
    return collapse_digit_runs(normalize_digit_words(text))


def extract_otp(text: str, matchers: Sequence[OtpMatcher] = DEFAULT_MATCHERS) -> Optional[str]:
    if not text:
        return None
    normalized = normalize_text(text)
    for matcher in matchers:
        otp = matcher.match(normalized)
        if otp:
            return otp
    return None
