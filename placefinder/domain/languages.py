"""Locales supported by the Google Places autocomplete endpoint."""

from __future__ import annotations

from enum import Enum


class GoogleLanguage(str, Enum):
    ARABIC = "ar"
    BULGARIAN = "bg"
    BENGALI = "bn"
    CATALAN = "ca"
    CZECH = "cs"
    DANISH = "da"
    DUTCH = "nl"
    GERMAN = "de"
    GREEK = "el"
    ENGLISH = "en"
    ENGLISH_AU = "en-AU"
    ENGLISH_GB = "en-GB"
    SPANISH = "es"
    BASQUE = "eu"
    CHINESE_SIMPLIFIED = "zh-CN"
    CHINESE_TRADITIONAL = "zh-TW"
    FARSI = "fa"
    FINNISH = "fi"
    FILIPINO = "fil"
    FRENCH = "fr"
    GALICIAN = "gl"
    GUJARATI = "gu"
    HINDI = "hi"
    CROATIAN = "hr"
    HUNGARIAN = "hu"
    INDONESIAN = "id"
    ITALIAN = "it"
    HEBREW = "iw"
    JAPANESE = "ja"
    KANNADA = "kn"
    KOREAN = "ko"
    LITHUANIAN = "lt"
    LATVIAN = "lv"
    MALAYALAM = "ml"
    MARATHI = "mr"
    NORWEGIAN = "no"
    POLISH = "pl"
    PORTUGUESE = "pt"
    PORTUGUESE_BR = "pt-BR"
    PORTUGUESE_PT = "pt-PT"
    ROMANIAN = "ro"
    RUSSIAN = "ru"
    SLOVAK = "sk"
    SLOVENIAN = "sl"
    SERBIAN = "sr"
    SWEDISH = "sv"
    TAMIL = "ta"
    TELUGU = "te"
    THAI = "th"
    TAGALOG = "tl"
    TURKISH = "tr"
    UKRAINIAN = "uk"
    VIETNAMESE = "vi"

    @classmethod
    def default(cls) -> GoogleLanguage:
        return cls.ENGLISH

    @classmethod
    def parse(cls, value: GoogleLanguage | str) -> GoogleLanguage:
        """Accept a member, a locale code (``"pt-BR"``) or a member name (``"portuguese_br"``)."""

        if isinstance(value, cls):
            return value
        text = str(value).strip()
        try:
            return cls(text)
        except ValueError:
            pass
        member = cls.__members__.get(text.upper().replace("-", "_"))
        if member is None:
            raise ValueError(f"Unsupported language: {value!r}")
        return member


__all__ = ["GoogleLanguage"]
