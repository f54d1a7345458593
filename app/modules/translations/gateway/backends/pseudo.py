"""Offline pseudo-localization backend.

Produces ``[es] Hello`` style output without any network call. Useful for
development, demos and tests where a deterministic translator is needed.
"""

from typing import Any, Dict

from modules.translations.gateway.base import TranslatorBackend
from modules.translations.gateway.registry import register_backend

_ACCENTS = str.maketrans(
    {
        "a": "á", "e": "é", "i": "í", "o": "ó", "u": "ú",
        "A": "Á", "E": "É", "I": "Í", "O": "Ó", "U": "Ú",
    }
)


@register_backend("pseudo")
class PseudoBackend(TranslatorBackend):
    """Pseudo-localizes text by tagging it with the target locale.

    Config:
        accent: Also accent vowels outside markup (default False).
    """

    def __init__(self, config: Dict[str, Any] = None, circuit_breaker=None):
        super().__init__(config=config, circuit_breaker=circuit_breaker)
        self.accent = bool(self.config.get("accent", False))

    def _translate_impl(self, text: str, source_locale: str, target_locale: str) -> str:
        if not text:
            return text
        body = _accent_outside_tags(text) if self.accent else text
        return f"[{target_locale}] {body}"


def _accent_outside_tags(text: str) -> str:
    out = []
    in_tag = False
    for ch in text:
        if ch == "<":
            in_tag = True
        elif ch == ">":
            in_tag = False
        out.append(ch if in_tag else ch.translate(_ACCENTS))
    return "".join(out)
