"""
Content Validator Engine

Scores generated material on five quality dimensions and reports typed
issues plus remediation suggestions.

Scoring:
    overall = 0.25 accuracy + 0.20 age appropriateness
            + 0.25 pedagogical soundness + 0.15 clarity + 0.15 engagement

Content is accepted only if overall >= acceptance threshold (0.6) and no
issue has type "error".
"""

import ast
import logging
import operator
import re
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple

from models.data_models import (
    IssueCategory,
    IssueType,
    MaterialType,
    QualityScore,
    ValidationIssue,
    ValidationResult,
)
from config.settings import get_config_for_material_type
from engines.text_heuristics import (
    TextHeuristicsEngine,
    average_content_word_length,
    average_words_per_sentence,
    contains_any,
    flatten_text,
    matched_keywords,
    word_count,
)
from utils.lenient_json import as_dict, as_list, get_text

logger = logging.getLogger(__name__)


_MATH_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(r"\d+\s*[+\-*/]\s*\d+"),             # basic operations
    re.compile(r"\d+\s*=\s*\d+"),                   # equations
    re.compile(r"[a-z]\s*[+\-*/]\s*[a-z]"),         # algebraic expressions
    re.compile(r"\d*[a-z](?:\^|\*\*)\d+"),          # powers
    re.compile(r"√\d+"),                            # square roots
    re.compile(r"\(\d+[+\-*/]\d+\)"),               # parentheses
)
_EQUATION = re.compile(
    r"(?<![\w.])(\d+(?:\s*[+\-*/]\s*\d+)+)\s*=\s*(\d+(?:\s*[+\-*/]\s*\d+)*)(?!\w|\.\d|\s*[+\-*/=]\s*\d)"
)
_NUMERIC_ONLY = re.compile(r"^[\d+\-*/()\s]+$")
_LEADING_ZEROS = re.compile(r"\b0+(\d)")
_VARIABLE = re.compile(r"[a-z]")
_MINUTES = re.compile(r"(\d+)\s*min", re.IGNORECASE)
_QUESTION_WORD = re.compile(r"\b(co|jak|kdy|kde|proč|který|kolik)\b", re.IGNORECASE)

MAX_EXPONENT = 64

OBJECTIVE_VERBS = ("naučí", "dokáže", "pochopí", "aplikuje", "analyzuje", "vytvoří", "zhodnotí")
INSTRUCTION_VERBS = ("napište", "vypočítajte", "vysvětlete", "najděte", "určete", "dokažte")
INTERACTIVE_WORDS = ("diskutujte", "pracujte ve skupinách", "prezentujte", "experimentujte", "zkoumejte")
RELEVANCE_WORDS = ("praktický", "každodenní", "skutečný", "aplikace", "příklad z praxe", "v životě")

FAILURE_SUGGESTION = "Opravte strukturální chyby v obsahu"

_BINARY_OPERATORS: Dict[type, Callable[[float, float], float]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}


# ============================================================================
# Shallow arithmetic check
# ============================================================================

def _evaluate_node(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _evaluate_node(node.body)
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.UnaryOp) and isinstance(node.op, (ast.USub, ast.UAdd)):
        value = _evaluate_node(node.operand)
        return -value if isinstance(node.op, ast.USub) else value
    if isinstance(node, ast.BinOp):
        left = _evaluate_node(node.left)
        right = _evaluate_node(node.right)
        if isinstance(node.op, ast.Pow):
            if abs(right) > MAX_EXPONENT:
                raise ValueError("exponent too large")
            return left ** right
        op = _BINARY_OPERATORS.get(type(node.op))
        if op is None:
            raise ValueError(f"unsupported operator {type(node.op).__name__}")
        return op(left, right)
    raise ValueError(f"unsupported expression {type(node).__name__}")


def evaluate_arithmetic(expression: str) -> float:
    """
    Evaluate a numeric-only arithmetic expression.

    Raises:
        SyntaxError: malformed expression
        ZeroDivisionError: division by zero
        ValueError: construct outside plain arithmetic
    """
    normalized = _LEADING_ZEROS.sub(r"\1", expression.strip())
    return _evaluate_node(ast.parse(normalized, mode="eval"))


def is_valid_math_expression(expression: str) -> bool:
    """Variables become 1; non-numeric leftovers are assumed valid."""
    numeric = _VARIABLE.sub("1", expression)
    if not _NUMERIC_ONLY.match(numeric):
        return True
    try:
        evaluate_arithmetic(numeric)
    except (SyntaxError, ZeroDivisionError):
        return False
    except ValueError:
        return True
    return True


def is_valid_equation(left: str, right: str) -> bool:
    """Both sides are numeric-only expressions; compared after evaluation."""
    try:
        value = evaluate_arithmetic(left)
        expected = evaluate_arithmetic(right)
    except (SyntaxError, ZeroDivisionError):
        return False
    except ValueError:
        return True
    return abs(value - expected) <= 1e-9 * max(1.0, abs(expected))


# ============================================================================
# Type-specific structure checks
# ============================================================================

def _structure_error(message: str, field: str) -> ValidationIssue:
    return ValidationIssue(IssueType.ERROR, IssueCategory.STRUCTURE, message, field=field)


def _structure_warning(message: str, field: str) -> ValidationIssue:
    return ValidationIssue(IssueType.WARNING, IssueCategory.STRUCTURE, message, field=field)


def check_worksheet_structure(content: Dict[str, Any], issues: List[ValidationIssue]) -> None:
    questions = content.get("questions")
    if not isinstance(questions, list):
        return
    if not questions:
        issues.append(_structure_error("Pracovní list musí obsahovat alespoň jednu úlohu", "questions"))
    for index, question in enumerate(questions):
        question = as_dict(question)
        if not question.get("problem") and not question.get("question"):
            issues.append(_structure_error(f"Úloha {index + 1} nemá zadání", f"questions[{index}].problem"))
        if not question.get("answer"):
            issues.append(_structure_error(f"Úloha {index + 1} nemá odpověď", f"questions[{index}].answer"))


def check_lesson_plan_structure(content: Dict[str, Any], issues: List[ValidationIssue]) -> None:
    activities = content.get("activities")
    if not isinstance(activities, list):
        return
    if not activities:
        issues.append(_structure_error("Plán hodiny musí obsahovat alespoň jednu aktivitu", "activities"))
    for index, activity in enumerate(activities):
        activity = as_dict(activity)
        if not activity.get("name"):
            issues.append(_structure_error(f"Aktivita {index + 1} nemá název", f"activities[{index}].name"))
        if not activity.get("time"):
            issues.append(_structure_error(f"Aktivita {index + 1} nemá časový údaj", f"activities[{index}].time"))


def check_quiz_structure(content: Dict[str, Any], issues: List[ValidationIssue]) -> None:
    questions = content.get("questions")
    if not isinstance(questions, list):
        return
    for index, question in enumerate(questions):
        question = as_dict(question)
        if not question.get("type"):
            issues.append(_structure_error(f"Otázka {index + 1} nemá specifikovaný typ", f"questions[{index}].type"))
        if question.get("type") == "multiple_choice" and len(as_list(question.get("options"))) < 2:
            issues.append(_structure_error(
                f"Otázka {index + 1} s výběrem musí mít alespoň 2 možnosti",
                f"questions[{index}].options",
            ))


def check_project_structure(content: Dict[str, Any], issues: List[ValidationIssue]) -> None:
    if content.get("deliverables") == []:
        issues.append(_structure_warning("Projekt by měl mít specifikované výstupy", "deliverables"))
    if content.get("rubric") == []:
        issues.append(_structure_warning("Projekt by měl mít hodnotící rubriku", "rubric"))


def check_presentation_structure(content: Dict[str, Any], issues: List[ValidationIssue]) -> None:
    slides = content.get("slides")
    if not isinstance(slides, list):
        return
    if not slides:
        issues.append(_structure_error("Prezentace musí obsahovat alespoň jeden slide", "slides"))
    for index, slide in enumerate(slides):
        if not as_dict(slide).get("heading"):
            issues.append(_structure_warning(f"Slide {index + 1} nemá nadpis", f"slides[{index}].heading"))


def check_activity_structure(content: Dict[str, Any], issues: List[ValidationIssue]) -> None:
    if content.get("instructions") == []:
        issues.append(_structure_error("Aktivita musí obsahovat pokyny", "instructions"))
    if content.get("materials") == []:
        issues.append(_structure_warning("Aktivita by měla specifikovat potřebné materiály", "materials"))


STRUCTURE_CHECKS: Dict[MaterialType, Callable[[Dict[str, Any], List[ValidationIssue]], None]] = {
    MaterialType.WORKSHEET: check_worksheet_structure,
    MaterialType.LESSON_PLAN: check_lesson_plan_structure,
    MaterialType.QUIZ: check_quiz_structure,
    MaterialType.PROJECT: check_project_structure,
    MaterialType.PRESENTATION: check_presentation_structure,
    MaterialType.ACTIVITY: check_activity_structure,
}


def _is_missing(value: Any) -> bool:
    """Absent, None, False, zero or empty string; empty collections count as present."""
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


def _grade_band(grade_level: str) -> int:
    """0: 1.-3. grade, 1: 4.-6., 2: 7.-9., 3: anything else."""
    for band, markers in enumerate((("1.", "2.", "3."), ("4.", "5.", "6."), ("7.", "8.", "9."))):
        if any(marker in grade_level for marker in markers):
            return band
    return 3


EXPECTED_WORD_LENGTH = (5, 6, 7, 8)
EXPECTED_SENTENCE_LENGTH = (8, 12, 16, 20)


def _parse_minutes(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        match = _MINUTES.search(value)
        return int(match.group(1)) if match else 0
    return 0


class ContentValidatorEngine:
    """
    Validates generated teaching material.

    validate_content never raises: any failure inside scoring produces an
    invalid result with an all-zero score and a single error issue.
    """

    def __init__(
        self,
        heuristics: Optional[TextHeuristicsEngine] = None,
        acceptance_threshold: float = 0.6,
    ):
        self.heuristics = heuristics or TextHeuristicsEngine()
        self.acceptance_threshold = acceptance_threshold

    def validate_content(self, content: Any, material_type: Any) -> ValidationResult:
        issues: List[ValidationIssue] = []

        try:
            if not isinstance(content, dict):
                raise TypeError(f"obsah musí být objekt, ne {type(content).__name__}")

            self.validate_structure(content, material_type, issues)

            score = QualityScore(
                accuracy=self.validate_accuracy(content, issues),
                age_appropriateness=self.check_age_appropriateness(content, issues),
                pedagogical_soundness=self.validate_pedagogical_soundness(content, material_type, issues),
                clarity=self.validate_clarity(content, issues),
                engagement=self.validate_engagement(content, issues),
            )
        except Exception as e:
            logger.error(f"[VALIDATOR] Validation failed: {e}")
            return ValidationResult(
                is_valid=False,
                score=QualityScore.zero(),
                issues=[ValidationIssue(
                    IssueType.ERROR,
                    IssueCategory.CONTENT,
                    f"Chyba při validaci obsahu: {e}",
                )],
                suggestions=[FAILURE_SUGGESTION],
            )

        has_errors = any(issue.type == IssueType.ERROR for issue in issues)
        is_valid = score.overall >= self.acceptance_threshold and not has_errors

        logger.info(
            f"[VALIDATOR] overall={score.overall:.2f}, issues={len(issues)}, valid={is_valid}"
        )
        return ValidationResult(
            is_valid=is_valid,
            score=score,
            issues=issues,
            suggestions=self.generate_suggestions(issues, score),
        )

    def check_educational_quality(self, content: Any) -> QualityScore:
        """Score only, with the material type inferred from the content shape."""
        return self.validate_content(content, self.detect_material_type(content)).score

    @staticmethod
    def detect_material_type(content: Any) -> MaterialType:
        content = as_dict(content)
        if content.get("questions"):
            return MaterialType.QUIZ
        if content.get("activities"):
            return MaterialType.LESSON_PLAN
        if content.get("slides"):
            return MaterialType.PRESENTATION
        if content.get("deliverables"):
            return MaterialType.PROJECT
        if content.get("goal") and content.get("materials"):
            return MaterialType.ACTIVITY
        return MaterialType.WORKSHEET

    # ------------------------------------------------------------------
    # Structure and accuracy
    # ------------------------------------------------------------------

    def validate_structure(self, content: Dict[str, Any], material_type: Any, issues: List[ValidationIssue]) -> None:
        for field_name in get_config_for_material_type(material_type).required_fields:
            if _is_missing(content.get(field_name)):
                issues.append(ValidationIssue(
                    IssueType.ERROR,
                    IssueCategory.STRUCTURE,
                    f"Chybí povinné pole: {field_name}",
                    field=field_name,
                    suggestion=f"Přidejte pole {field_name}",
                ))

        check = STRUCTURE_CHECKS.get(MaterialType.parse(material_type))
        if check is not None:
            check(content, issues)

    def validate_accuracy(self, content: Dict[str, Any], issues: List[ValidationIssue]) -> float:
        score = 1.0
        text = flatten_text(content)
        if self.contains_math_content(text) and not self.validate_mathematical_accuracy(content):
            issues.append(ValidationIssue(
                IssueType.ERROR,
                IssueCategory.MATH,
                "Nalezeny matematické chyby v obsahu",
                suggestion="Zkontrolujte všechny výpočty a vzorce",
            ))
            score *= 0.3
        return max(0.0, score)

    @staticmethod
    def contains_math_content(text: str) -> bool:
        return any(pattern.search(text) for pattern in _MATH_PATTERNS)

    def validate_mathematical_accuracy(self, content: Any) -> bool:
        """False if any numeric expression fails to evaluate or any numeric equation is wrong."""
        text = flatten_text(content)

        for pattern in _MATH_PATTERNS:
            for match in pattern.finditer(text):
                if not is_valid_math_expression(match.group(0)):
                    return False

        for match in _EQUATION.finditer(text):
            if not is_valid_equation(match.group(1), match.group(2)):
                return False

        return True

    # ------------------------------------------------------------------
    # Age appropriateness
    # ------------------------------------------------------------------

    def check_age_appropriateness(self, content: Dict[str, Any], issues: List[ValidationIssue]) -> float:
        score = 1.0
        grade_level = content.get("grade_level") if isinstance(content.get("grade_level"), str) else ""
        band = _grade_band(grade_level)
        text = flatten_text(content)

        average_length = average_content_word_length(text)
        vocabulary_score = 1.0
        if average_length:
            vocabulary_score = max(0.0, min(1.0, 2 - average_length / EXPECTED_WORD_LENGTH[band]))
        if vocabulary_score < 0.7:
            issues.append(ValidationIssue(
                IssueType.WARNING,
                IssueCategory.LANGUAGE,
                "Slovní zásoba může být příliš složitá pro daný ročník",
                suggestion="Použijte jednodušší slova a kratší věty",
            ))
            score *= 0.8

        if average_words_per_sentence(text) > EXPECTED_SENTENCE_LENGTH[band] * 1.5:
            issues.append(ValidationIssue(
                IssueType.WARNING,
                IssueCategory.LANGUAGE,
                "Věty jsou příliš složité pro daný ročník",
                suggestion="Rozdělte dlouhé věty na kratší a jednodušší",
            ))
            score *= 0.9

        inappropriate = self.heuristics.detect_inappropriate_content(text)
        if inappropriate:
            issues.append(ValidationIssue(
                IssueType.ERROR,
                IssueCategory.CONTENT,
                f"Nevhodný obsah pro daný věk: {', '.join(inappropriate)}",
                suggestion="Odstraňte nebo upravte nevhodný obsah",
            ))
            score *= 0.5

        return max(0.0, score)

    # ------------------------------------------------------------------
    # Pedagogy
    # ------------------------------------------------------------------

    def validate_pedagogical_soundness(
        self,
        content: Dict[str, Any],
        material_type: Any,
        issues: List[ValidationIssue],
    ) -> float:
        score = 1.0
        parsed = MaterialType.parse(material_type)

        objectives = content.get("objectives")
        if isinstance(objectives, list) and self._objective_quality(objectives) < 0.7:
            issues.append(ValidationIssue(
                IssueType.WARNING,
                IssueCategory.PEDAGOGY,
                "Cíle učení nejsou dostatečně konkrétní nebo měřitelné",
                suggestion="Formulujte cíle pomocí akčních sloves (naučí se, dokáže, pochopí)",
            ))
            score *= 0.8

        questions = content.get("questions")
        if parsed == MaterialType.WORKSHEET and isinstance(questions, list) and questions:
            if self._length_progression(questions) < 0.6:
                issues.append(ValidationIssue(
                    IssueType.WARNING,
                    IssueCategory.PEDAGOGY,
                    "Úlohy nemají vhodnou postupnou obtížnost",
                    suggestion="Uspořádejte úlohy od nejjednodušších k nejobtížnějším",
                ))
                score *= 0.9

        activities = content.get("activities")
        if parsed == MaterialType.LESSON_PLAN and isinstance(activities, list) and activities and content.get("duration"):
            timing = self._activity_timing(activities, content.get("duration"))
            if timing is not None and timing < 0.8:
                issues.append(ValidationIssue(
                    IssueType.WARNING,
                    IssueCategory.PEDAGOGY,
                    "Časový rozvrh aktivit neodpovídá celkové délce hodiny",
                    suggestion="Upravte časy jednotlivých aktivit tak, aby odpovídaly celkové délce",
                ))
                score *= 0.9

        return max(0.0, score)

    @staticmethod
    def _objective_quality(objectives: List[Any]) -> float:
        if not objectives:
            return 0.0
        measurable = [o for o in objectives if isinstance(o, str) and contains_any(o, OBJECTIVE_VERBS)]
        return len(measurable) / len(objectives)

    @staticmethod
    def _length_progression(questions: List[Any]) -> float:
        """Fraction of adjacent pairs whose text length does not decrease."""
        if len(questions) < 2:
            return 1.0
        lengths = [len(get_text(q, "problem", "question")) for q in questions]
        rising = sum(1 for prev, curr in zip(lengths, lengths[1:]) if curr >= prev)
        return rising / (len(questions) - 1)

    @staticmethod
    def _activity_timing(activities: List[Any], duration: Any) -> Optional[float]:
        """1 - |declared - sum| / declared; None when the declared duration has no minutes."""
        declared = _parse_minutes(duration)
        if declared <= 0:
            return None
        planned = sum(_parse_minutes(as_dict(a).get("time")) for a in activities)
        return max(0.0, 1 - abs(declared - planned) / declared)

    # ------------------------------------------------------------------
    # Clarity
    # ------------------------------------------------------------------

    def validate_clarity(self, content: Dict[str, Any], issues: List[ValidationIssue]) -> float:
        score = 1.0

        instructions = content.get("instructions")
        if isinstance(instructions, str):
            instructions = [instructions]
        for instruction in as_list(instructions):
            if isinstance(instruction, str) and self.assess_instruction_clarity(instruction) < 0.7:
                issues.append(ValidationIssue(
                    IssueType.WARNING,
                    IssueCategory.LANGUAGE,
                    "Některé pokyny nejsou dostatečně jasné",
                    suggestion="Použijte konkrétní a jednoznačné formulace",
                ))
                score *= 0.9
                break

        questions = content.get("questions")
        if isinstance(questions, list) and questions:
            unclear = [
                q for q in questions
                if self.assess_question_clarity(get_text(q, "question", "problem")) < 0.7
            ]
            if unclear:
                issues.append(ValidationIssue(
                    IssueType.WARNING,
                    IssueCategory.LANGUAGE,
                    f"{len(unclear)} otázek není dostatečně jasných",
                    suggestion="Přeformulujte nejasné otázky jednodušeji a konkrétněji",
                ))
                score *= max(0.6, 1 - (len(unclear) / len(questions)) * 0.5)

        return max(0.0, score)

    @staticmethod
    def assess_instruction_clarity(instruction: str) -> float:
        has_verb = contains_any(instruction, INSTRUCTION_VERBS)
        words = word_count(instruction)
        return (0.6 if has_verb else 0.2) + (0.4 if 3 <= words <= 30 else 0.1)

    @staticmethod
    def assess_question_clarity(question: str) -> float:
        if not question or len(question) < 5:
            return 0.0
        score = 0.3
        if _QUESTION_WORD.search(question) or question.strip().endswith("?"):
            score += 0.4
        if 10 <= len(question) <= 200:
            score += 0.3
        return score

    # ------------------------------------------------------------------
    # Engagement
    # ------------------------------------------------------------------

    def validate_engagement(self, content: Dict[str, Any], issues: List[ValidationIssue]) -> float:
        text = flatten_text(content)

        variety = 0.0
        questions = content.get("questions")
        if isinstance(questions, list):
            types = {str(as_dict(q).get("type")) for q in questions}
            variety += min(1.0, len(types) / 3)
        activities = content.get("activities")
        if isinstance(activities, list):
            variety += min(1.0, len(activities) / 5)
        variety = min(1.0, variety)

        interactivity = min(1.0, len(matched_keywords(text, INTERACTIVE_WORDS)) / 3)
        relevance = min(1.0, len(matched_keywords(text, RELEVANCE_WORDS)) / 2)

        score = 0.5 + variety * 0.3 + interactivity * 0.2 + relevance * 0.3
        if score < 0.6:
            issues.append(ValidationIssue(
                IssueType.INFO,
                IssueCategory.PEDAGOGY,
                "Obsah by mohl být více poutavý pro žáky",
                suggestion="Přidejte praktické příklady, různorodé aktivity nebo interaktivní prvky",
            ))
        return min(1.0, score)

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    @staticmethod
    def generate_suggestions(issues: List[ValidationIssue], score: QualityScore) -> List[str]:
        suggestions = [issue.suggestion for issue in issues if issue.suggestion]

        if score.accuracy < 0.7:
            suggestions.append("Zkontrolujte faktickou správnost všech informací")
        if score.clarity < 0.7:
            suggestions.append("Zjednodušte jazyk a zpřesněte formulace")
        if score.engagement < 0.6:
            suggestions.append("Přidejte více interaktivních prvků a praktických příkladů")
        if score.pedagogical_soundness < 0.7:
            suggestions.append("Zkontrolujte soulad s pedagogickými principy")

        return list(dict.fromkeys(suggestions))
