from dataclasses import dataclass, field
from typing import Optional, Tuple
from com.otprelay.infra.parser.otp_parser import DEFAULT_MATCHERS, OtpMatcher, compile_matcher, extract_otp

@dataclass(frozen=True)
class OtpExtractService:
    otp_regex: str = ""
    matchers: Tuple[OtpMatcher, ...] = field(init=False)

    def __post_init__(self):
        custom = compile_matcher("custom", self.otp_regex) if self.otp_regex.strip() else None
        matchers = (custom,) + DEFAULT_MATCHERS if custom else DEFAULT_MATCHERS
        object.__setattr__(self, "matchers", matchers)

    def extract(self, text: str) -> Optional[str]:
        return extract_otp(text, self.matchers)
