import re
from typing import Optional

class IdValidator:
    """Checks for book and member identifiers typed into the shell.
    An id is a single token: no inner whitespace, at most 32 characters.
    """

    MAX_LENGTH = 32

    @staticmethod
    def normalize_id(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return raw.strip()

    @staticmethod
    def is_valid_id(raw: Optional[str]) -> bool:
        s = IdValidator.normalize_id(raw)
        if not s or len(s) > IdValidator.MAX_LENGTH:
            return False
        return re.search(r"\s", s) is None

class TextValidator:
    """Basic text validations and sanitization for titles, authors and names."""

    @staticmethod
    def validate_required(text: Optional[str]) -> bool:
        if text is None:
            return False
        return bool(text.strip())

    @staticmethod
    def validate_name(name: Optional[str]) -> bool:
        # must contain at least one letter
        if not TextValidator.validate_required(name):
            return False
        return any(c.isalpha() for c in name)

    @staticmethod
    def sanitize_text(text: Optional[str]) -> str:
        if text is None:
            return ""
        # strip markup so it cannot leak into rich output
        cleaned = re.sub(r"<[^>]*>", "", text)
        cleaned = re.sub(r"\s+", " ", cleaned)
        return cleaned.strip()
