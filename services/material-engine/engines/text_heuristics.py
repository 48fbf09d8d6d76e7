"""
Text Heuristics Engine

Stateless Czech-language text primitives shared by the assignment
analyzer, the content structurer and the content validator.

All classification here is keyword/regex/length based. Lookup tables are
module-level constants built once at import and never mutated.
"""

import re
from collections import Counter
from typing import Any, Dict, Iterable, List, Pattern, Tuple

from models.data_models import BloomLevel, DifficultyLevel, LearningStyle


# ============================================================================
# Lookup tables
# ============================================================================

CZECH_STOP_WORDS = frozenset([
    "a", "aby", "ale", "ani", "ano", "asi", "až", "bez", "být", "co", "či",
    "do", "ho", "i", "já", "je", "jeho", "její", "jejich", "jen", "již",
    "jsem", "jsi", "jsme", "jsou", "jste", "k", "kam", "kde", "kdo", "kdy",
    "když", "ma", "má", "mají", "máme", "máš", "máte", "mi", "mít", "mně",
    "mnou", "můj", "může", "my", "na", "nad", "nám", "námi", "nás", "náš",
    "ne", "nebo", "něco", "něj", "není", "nějak", "někde", "někdo", "němu",
    "ni", "nic", "ním", "nimi", "o", "od", "po", "pod", "pokud", "pro",
    "proč", "před", "při", "s", "se", "si", "sice", "svá", "své", "svůj",
    "ta", "tak", "také", "tam", "te", "tě", "těm", "těmi", "ti", "to",
    "toto", "tu", "ty", "u", "už", "v", "ve", "více", "všech", "vy", "z",
    "za", "ze", "že",
])

# Checked in declaration order; the first matching subject wins
SUBJECT_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("matematika", ("matematika", "počty", "algebra", "geometrie", "statistika", "rovnice")),
    ("čeština", ("čeština", "literatura", "gramatika", "pravopis", "sloh", "čtení")),
    ("přírodověda", ("přírodověda", "biologie", "fyzika", "chemie", "příroda")),
    ("dějepis", ("dějepis", "historie", "minulost", "události", "období")),
    ("zeměpis", ("zeměpis", "geografie", "země", "kontinenty", "mapy")),
    ("angličtina", ("angličtina", "english", "anglický jazyk")),
    ("informatika", ("informatika", "počítače", "programování")),
)

DEFAULT_SUBJECT = "obecný"
UNDETERMINED_GRADE = "neurčeno"
DEFAULT_DURATION = "45 min"

DIFFICULTY_KEYWORDS: Dict[DifficultyLevel, Tuple[str, ...]] = {
    DifficultyLevel.BASIC: (
        "základy", "úvod", "jednoduchý", "základní", "začátečník",
        "první", "elementární", "snadný", "lehký",
    ),
    DifficultyLevel.INTERMEDIATE: (
        "střední", "pokročilejší", "rozšířený", "aplikace", "praktický",
        "kombinace", "analýza", "porovnání",
    ),
    DifficultyLevel.ADVANCED: (
        "pokročilý", "složitý", "komplexní", "syntéza", "kritické myšlení",
        "evaluace", "tvorba", "design", "řešení problémů",
    ),
    DifficultyLevel.EXPERT: (
        "expertní", "výzkum", "inovace", "originální", "vědecký",
        "teoretický", "abstraktní", "meta-analýza",
    ),
}

INAPPROPRIATE_KEYWORDS: Tuple[str, ...] = ("násilí", "alkohol", "drogy", "sex", "smrt")

BLOOM_VERBS: Dict[BloomLevel, Tuple[str, ...]] = {
    BloomLevel.REMEMBER: ("zapamatujte", "vyjmenujte", "definujte", "označte", "pojmenujte"),
    BloomLevel.UNDERSTAND: ("vysvětlete", "popište", "shrňte", "interpretujte", "klasifikujte"),
    BloomLevel.APPLY: ("použijte", "aplikujte", "vypočítajte", "demonstrujte", "řešte"),
    BloomLevel.ANALYZE: ("analyzujte", "porovnejte", "rozlište", "zkoumejte", "kategorizujte"),
    BloomLevel.EVALUATE: ("zhodnoťte", "kritizujte", "obhajte", "posuďte", "posouďte", "argumentujte"),
    BloomLevel.CREATE: ("vytvořte", "navrhněte", "sestavte", "formulujte", "konstruujte"),
}

LEARNING_STYLE_INDICATORS: Dict[LearningStyle, Tuple[str, ...]] = {
    LearningStyle.VISUAL: ("obrázek", "diagram", "graf", "schéma", "mapa", "tabulka", "barevně"),
    LearningStyle.AUDITORY: ("poslouchejte", "diskutujte", "vysvětlete", "řekněte", "prezentujte", "debata"),
    LearningStyle.KINESTHETIC: ("prakticky", "manipulujte", "stavějte", "experimentujte", "pohyb", "dotyk"),
    LearningStyle.READING: ("přečtěte", "napište", "text", "kniha", "článek", "poznámky"),
}

_OBJECTIVE_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(r"cíl[e]?\s*[:]\s*([^.!?]+)", re.IGNORECASE),
    re.compile(r"student[iy]?\s+(?:se\s+)?(?:naučí|zvládnou|pochopí|dokáží)\s*([^.!?]+)", re.IGNORECASE),
    re.compile(
        r"po\s+(?:této\s+)?hodině\s+(?:student[iy]?\s+)?(?:budou\s+)?(?:umět|znát|chápat)\s*([^.!?]+)",
        re.IGNORECASE,
    ),
    re.compile(r"(?:naučit|pochopit|zvládnout|osvojit)\s+(?:si\s+)?([^.!?]+)", re.IGNORECASE),
)

# (pattern, counts as "ročník")
_GRADE_PATTERNS: Tuple[Tuple[Pattern, bool], ...] = (
    (re.compile(r"(\d+)\.\s*třída", re.IGNORECASE), False),
    (re.compile(r"(\d+)\.\s*ročník", re.IGNORECASE), True),
    (re.compile(r"pro\s+(\d+)\.\s*třídu", re.IGNORECASE), False),
    (re.compile(r"žáci?\s+(\d+)\.\s*třídy", re.IGNORECASE), False),
)

_SECONDARY_SCHOOL_MARKERS = re.compile(r"\bSŠ\b|střední\s+škol|gymnázi", re.IGNORECASE)

_DURATION_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(r"(\d+)\s*(?:minut|min)", re.IGNORECASE),
    re.compile(r"(\d+)\s*hodin?", re.IGNORECASE),
    re.compile(r"(\d+)\s*vyučovacích?\s+hodin?", re.IGNORECASE),
)

_CZECH_WORD = re.compile(r"^[a-záčďéěíňóřšťúůýž]+$")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_WHITESPACE = re.compile(r"\s+")

MAX_OBJECTIVES = 5
MIN_OBJECTIVE_LENGTH = 10
MAX_KEY_CONCEPTS = 8


# ============================================================================
# Generic helpers
# ============================================================================

def flatten_text(value: Any) -> str:
    """Concatenate every string found in a nested dict/list structure."""
    parts: List[str] = []
    stack = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, dict):
            stack.extend(reversed(list(item.values())))
        elif isinstance(item, (list, tuple)):
            stack.extend(reversed(item))
    return " ".join(parts) + (" " if parts else "")


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def matched_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    """Keywords (in table order) that occur in text, case-insensitively."""
    lowered = text.lower()
    return [keyword for keyword in keywords if keyword in lowered]


def word_count(text: str) -> int:
    """Whitespace-split token count; the empty string counts as one token."""
    return len(_WHITESPACE.split(text))


def average_words_per_sentence(text: str) -> float:
    """Mean words per non-empty sentence, 0.0 when there is none."""
    sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    if not sentences:
        return 0.0
    return sum(len(_WHITESPACE.split(s)) for s in sentences) / len(sentences)


def average_content_word_length(text: str, min_length: int = 4) -> float:
    """Mean length of non-stop-words at least min_length long, 0.0 if none."""
    words = [
        w for w in _WHITESPACE.split(text.lower())
        if len(w) >= min_length and w not in CZECH_STOP_WORDS
    ]
    if not words:
        return 0.0
    return sum(len(w) for w in words) / len(words)


# ============================================================================
# Engine
# ============================================================================

class TextHeuristicsEngine:
    """
    Czech keyword/regex heuristics.

    Every method is total: it never raises and returns a safe default for
    empty or degenerate input.
    """

    def extract_learning_objectives(self, text: str) -> List[str]:
        """At most five objectives; synthesized from key concepts if none match."""
        text = text if isinstance(text, str) else ""
        objectives: List[str] = []

        for pattern in _OBJECTIVE_PATTERNS:
            for match in pattern.finditer(text):
                objective = (match.group(1) or "").strip()
                if len(objective) > MIN_OBJECTIVE_LENGTH and objective not in objectives:
                    objectives.append(objective)

        if not objectives:
            concepts = self.extract_key_concepts(text)
            objectives = [f"Pochopit {concept}" for concept in concepts[:3]]

        return objectives[:MAX_OBJECTIVES]

    def detect_difficulty(self, text: str) -> DifficultyLevel:
        text = text if isinstance(text, str) else ""
        lowered = text.lower()
        scores: Dict[DifficultyLevel, float] = {level: 0 for level in DifficultyLevel}

        for level, indicators in DIFFICULTY_KEYWORDS.items():
            for indicator in indicators:
                scores[level] += lowered.count(indicator)

        # split() keeps the trailing empty piece, so never divides by zero
        sentence_count = len(_SENTENCE_SPLIT.split(text))
        avg_words = word_count(text) / sentence_count

        if avg_words > 20:
            scores[DifficultyLevel.ADVANCED] += 2
        elif avg_words > 15:
            scores[DifficultyLevel.INTERMEDIATE] += 1
        else:
            scores[DifficultyLevel.BASIC] += 1

        best_level = DifficultyLevel.INTERMEDIATE
        best_score = None
        for level in DifficultyLevel:
            if best_score is None or scores[level] > best_score:
                best_level, best_score = level, scores[level]
        return best_level

    def detect_subject(self, text: str) -> str:
        lowered = text.lower() if isinstance(text, str) else ""
        for subject, keywords in SUBJECT_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return subject
        return DEFAULT_SUBJECT

    def detect_grade_level(self, text: str) -> str:
        text = text if isinstance(text, str) else ""
        secondary = bool(_SECONDARY_SCHOOL_MARKERS.search(text))

        for pattern, is_year_pattern in _GRADE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            grade = int(match.group(1))
            if is_year_pattern and secondary and 1 <= grade <= 4:
                return f"{grade}. ročník SŠ"
            if 1 <= grade <= 9:
                return f"{grade}. třída ZŠ"

        return UNDETERMINED_GRADE

    def estimate_duration(self, text: str) -> str:
        text = text if isinstance(text, str) else ""
        for pattern in _DURATION_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(0)

        words = word_count(text)
        if words < 50:
            return "20 min"
        if words < 100:
            return "45 min"
        if words < 200:
            return "90 min"
        return "2 hodiny"

    def extract_key_concepts(self, text: str) -> List[str]:
        """Top eight frequent content words (ties keep first-seen order)."""
        lowered = text.lower() if isinstance(text, str) else ""
        words = [
            word for word in _WHITESPACE.split(lowered)
            if len(word) > 4 and not self.is_stop_word(word) and _CZECH_WORD.match(word)
        ]
        counts = Counter(words)
        ranked = sorted(counts.items(), key=lambda item: -item[1])
        return [word for word, _ in ranked[:MAX_KEY_CONCEPTS]]

    @staticmethod
    def is_stop_word(word: str) -> bool:
        return word in CZECH_STOP_WORDS

    def detect_inappropriate_content(self, text: str) -> List[str]:
        return matched_keywords(text if isinstance(text, str) else "", INAPPROPRIATE_KEYWORDS)
