from typing import Optional

from book import FIELD_SEPARATOR


class TextValidator:
    """Checks raw user text before it reaches the catalog.

    The catalog files do not escape separators, so a comma or line break in
    a title, author or name would corrupt the row on reload.
    """

    FORBIDDEN = (FIELD_SEPARATOR, "\n", "\r")

    @staticmethod
    def sanitize_text(text: Optional[str]) -> str:
        if text is None:
            return ""
        return text.strip()

    @staticmethod
    def problem(text: Optional[str], label: str) -> Optional[str]:
        """Return a message describing why ``text`` is unusable, or None."""
        t = TextValidator.sanitize_text(text)
        if not t:
            return f"{label} cannot be empty."
        if any(ch in t for ch in TextValidator.FORBIDDEN):
            return f"{label} cannot contain commas or line breaks."
        return None
