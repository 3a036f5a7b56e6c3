"""Detection of script and language of a release from its titles.

Providers rarely return either, so the merged release gets both guessed from
its release and track titles. The detected distributions are recorded as
debug messages; only confident results are assigned to the release.
"""

from __future__ import annotations

import unicodedata
from collections import Counter
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException

from harmonipy.domain.model import Language, MessageSeverity

if TYPE_CHECKING:
    from collections.abc import Callable

    from harmonipy.domain.model import Release

log = getLogger(__name__)

# Deterministic guesses for identical titles.
DetectorFactory.seed = 0

MIN_SCRIPT_FREQUENCY: Final = 0.7
MIN_LANGUAGE_CONFIDENCE: Final = 0.8
MIN_REPORTED_CONFIDENCE: Final = 0.1

# ISO 15924 codes by the first words of the Unicode character names,
# ordered by how common the scripts are for releases.
_SCRIPT_PREFIXES: Final[tuple[tuple[str, str], ...]] = (
    ("LATIN", "Latn"),
    ("CJK", "Hani"),
    ("KATAKANA", "Kana"),
    ("HIRAGANA", "Hira"),
    ("CYRILLIC", "Cyrl"),
    ("GREEK", "Grek"),
    ("HANGUL", "Hang"),
    ("HEBREW", "Hebr"),
    ("ARABIC", "Arab"),
    ("THAI", "Thai"),
)
_SCRIPT_WEIGHTS: Final[dict[str, int]] = {"Hani": 4, "Hira": 3, "Kana": 3}
_SCRIPT_COMBINATIONS: Final[dict[str, tuple[str, ...]]] = {
    "Jpan": ("Kana", "Hira", "Hani"),
    "Kore": ("Hang", "Hani"),
}
SCRIPT_NAMES: Final[dict[str, str]] = {
    "Latn": "Latin",
    "Hani": "Han",
    "Kana": "Katakana",
    "Hira": "Hiragana",
    "Cyrl": "Cyrillic",
    "Grek": "Greek",
    "Hang": "Hangul",
    "Hebr": "Hebrew",
    "Arab": "Arabic",
    "Thai": "Thai",
    "Jpan": "Japanese",
    "Kore": "Korean",
}

type LanguageGuesser = Callable[[str], list[Language]]


@dataclass(frozen=True, slots=True)
class ScriptFrequency:
    code: str
    frequency: float

    def __str__(self) -> str:
        return f"{SCRIPT_NAMES.get(self.code, self.code)} ({round(self.frequency * 100)}%)"


def script_of(char: str) -> str | None:
    """ISO 15924 code of a letter, ``None`` for other characters and unknown scripts."""

    if not char.isalpha():
        return None
    name = unicodedata.name(char, "").removeprefix("FULLWIDTH ").removeprefix("HALFWIDTH ")
    for prefix, code in _SCRIPT_PREFIXES:
        if name.startswith(prefix):
            return code
    return None


def detect_scripts(text: str) -> list[ScriptFrequency]:
    """Weighted frequencies of the scripts of all letters, most frequent first.

    Logographic scripts carry more information per letter and are weighted
    higher. Japanese and Korean are reported as combinations of their scripts.
    """

    counts = Counter(code for char in text if (code := script_of(char)) is not None)
    weighted = {code: count * _SCRIPT_WEIGHTS.get(code, 1) for code, count in counts.items()}
    total = sum(weighted.values())
    if not total:
        return []

    frequencies = {code: value / total for code, value in weighted.items()}
    for combined, parts in _SCRIPT_COMBINATIONS.items():
        present = [frequencies[part] for part in parts if part in frequencies]
        if len(present) > 1:
            frequencies[combined] = sum(present)

    return sorted(
        (ScriptFrequency(code, frequency) for code, frequency in frequencies.items()),
        key=lambda script: script.frequency,
        reverse=True,
    )


def guess_languages(text: str) -> list[Language]:
    """Guess the language of the text, most probable first."""

    try:
        guesses = detect_langs(text)
    except LangDetectException as error:
        log.debug("Language of %r could not be guessed: %s", text, error)
        return []
    return [Language(code=guess.lang, confidence=guess.prob) for guess in guesses]


def detect_language_and_script(
    release: Release,
    *,
    guess: LanguageGuesser = guess_languages,
) -> None:
    """Detect the script and guess the language of the release if they are missing."""

    titles = [track.title for medium in release.media for track in medium.tracklist]
    titles.append(release.title)
    text = "\n".join(titles)

    if not release.script:
        scripts = detect_scripts(text)
        release.add_message(
            f"Detected scripts of the titles: {', '.join(map(str, scripts)) or 'none'}",
            MessageSeverity.DEBUG,
        )
        if scripts and scripts[0].frequency > MIN_SCRIPT_FREQUENCY:
            release.script = scripts[0].code

    if not release.language:
        languages = guess(text)
        reported = [
            f"{language.code} ({round((language.confidence or 0) * 100)}% confidence)"
            for language in languages
            if (language.confidence or 0) > MIN_REPORTED_CONFIDENCE
        ]
        release.add_message(
            f"Guessed language of the titles: {', '.join(reported) or 'none'}",
            MessageSeverity.DEBUG,
        )
        top = languages[0] if languages else None
        if top is not None and (top.confidence or 0) > MIN_LANGUAGE_CONFIDENCE:
            release.language = top
