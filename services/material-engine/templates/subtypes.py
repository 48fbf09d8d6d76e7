"""
Predefined Material Subtypes
Ready-to-use specializations of each material type.
"""

from typing import Dict, List, Optional

from models.data_models import (
    MaterialSubtype,
    MaterialType,
    ModificationType,
    PromptModification,
    TemplateField,
)


def _append(*hints: str) -> List[PromptModification]:
    return [PromptModification(type=ModificationType.APPEND, content=hint) for hint in hints]


# =============================================================================
# WORKSHEET
# =============================================================================

PRACTICE_PROBLEMS = MaterialSubtype(
    id="practice-problems",
    name="Cvičné úlohy",
    description="Strukturované cvičení pro procvičování nových dovedností",
    parent_type=MaterialType.WORKSHEET,
    special_fields=[
        TemplateField(
            name="problemTypes",
            type="multiselect",
            label="Typy úloh",
            options=["výpočty", "slovní úlohy", "aplikace", "analýza", "syntéza"],
        ),
        TemplateField(
            name="scaffoldingLevel",
            type="select",
            label="Úroveň podpory",
            options=["minimální", "střední", "vysoká"],
        ),
        TemplateField(name="includeHints", type="boolean", label="Zahrnout nápovědy"),
    ],
    prompt_modifications=_append(
        "Zaměř se na postupné zvyšování obtížnosti",
        "Poskytni jasné kroky řešení pro první úlohy",
        "Zahrň různé typy problémů pro komplexní pochopení",
    ),
)

HOMEWORK_ASSIGNMENT = MaterialSubtype(
    id="homework-assignment",
    name="Domácí úkol",
    description="Samostatná práce pro upevnění učiva",
    parent_type=MaterialType.WORKSHEET,
    special_fields=[
        TemplateField(
            name="timeEstimate",
            type="select",
            label="Odhadovaný čas",
            options=["15 min", "30 min", "45 min", "60 min"],
        ),
        TemplateField(name="parentGuidance", type="boolean", label="Zahrnout pokyny pro rodiče"),
        TemplateField(name="selfCheck", type="boolean", label="Přidat možnost sebekontroly"),
    ],
    prompt_modifications=_append(
        "Vytvoř úlohy vhodné pro samostatnou práci doma",
        "Zahrň jasné instrukce a očekávané výsledky",
        "Přidej tipy pro rodiče, jak pomoci",
    ),
)

ASSESSMENT_WORKSHEET = MaterialSubtype(
    id="assessment-worksheet",
    name="Hodnotící list",
    description="Pracovní list pro hodnocení znalostí",
    parent_type=MaterialType.WORKSHEET,
    special_fields=[
        TemplateField(name="pointSystem", type="boolean", label="Zahrnout bodové hodnocení"),
        TemplateField(name="rubric", type="boolean", label="Přidat hodnotící kritéria"),
    ],
    prompt_modifications=_append(
        "Vytvoř úlohy vhodné pro hodnocení znalostí",
        "Zahrň jasná hodnotící kritéria",
        "Zajisti spravedlivé rozložení obtížnosti",
    ),
)


# =============================================================================
# QUIZ
# =============================================================================

FORMATIVE_ASSESSMENT = MaterialSubtype(
    id="formative-assessment",
    name="Formativní hodnocení",
    description="Kvíz pro průběžné ověření porozumění",
    parent_type=MaterialType.QUIZ,
    special_fields=[
        TemplateField(
            name="feedbackLevel",
            type="select",
            label="Úroveň zpětné vazby",
            options=["základní", "podrobná", "s vysvětlením"],
        ),
        TemplateField(name="allowRetakes", type="boolean", label="Povolit opakování"),
    ],
    prompt_modifications=_append(
        "Zaměř se na ověření porozumění klíčových konceptů",
        "Poskytni konstruktivní zpětnou vazbu",
        "Vytvoř otázky podporující učení",
    ),
)

SUMMATIVE_TEST = MaterialSubtype(
    id="summative-test",
    name="Sumativní test",
    description="Komplexní test pro finální hodnocení",
    parent_type=MaterialType.QUIZ,
    special_fields=[
        TemplateField(
            name="coverageScope",
            type="select",
            label="Rozsah pokrytí",
            options=["jedna lekce", "kapitola", "celé období", "ročník"],
        ),
        TemplateField(
            name="difficultyDistribution",
            type="select",
            label="Rozložení obtížnosti",
            options=["rovnoměrné", "pyramida (lehké→těžké)", "diamant (střední převaha)"],
        ),
    ],
    prompt_modifications=_append(
        "Vytvoř komplexní test pokrývající všechny klíčové oblasti",
        "Zajisti vyvážené rozložení obtížnosti",
        "Zahrň různé typy otázek pro spravedlivé hodnocení",
    ),
)

DIAGNOSTIC_ASSESSMENT = MaterialSubtype(
    id="diagnostic-assessment",
    name="Diagnostické hodnocení",
    description="Kvíz pro zjištění úrovně znalostí",
    parent_type=MaterialType.QUIZ,
    special_fields=[
        TemplateField(name="skillMapping", type="boolean", label="Mapování dovedností"),
        TemplateField(name="adaptiveQuestions", type="boolean", label="Adaptivní otázky"),
    ],
    prompt_modifications=_append(
        "Vytvoř otázky pro zjištění současné úrovně znalostí",
        "Zaměř se na identifikaci mezer ve znalostech",
        "Poskytni doporučení pro další učení",
    ),
)


# =============================================================================
# LESSON PLAN
# =============================================================================

INTRODUCTION_LESSON = MaterialSubtype(
    id="introduction-lesson",
    name="Úvodní hodina",
    description="Představení nového tématu nebo konceptu",
    parent_type=MaterialType.LESSON_PLAN,
    special_fields=[
        TemplateField(
            name="priorKnowledge",
            type="textarea",
            label="Předchozí znalosti",
            placeholder="Co by studenti měli už znát?",
        ),
        TemplateField(
            name="hookActivity",
            type="textarea",
            label="Úvodní aktivita",
            placeholder="Jak zaujmout pozornost studentů?",
        ),
    ],
    prompt_modifications=_append(
        "Zaměř se na motivaci a zaujmutí studentů",
        "Navažuj na předchozí znalosti",
        "Vytvoř jasný přehled toho, co se studenti naučí",
    ),
)

PRACTICE_LESSON = MaterialSubtype(
    id="practice-lesson",
    name="Procvičovací hodina",
    description="Upevnění a procvičení naučeného",
    parent_type=MaterialType.LESSON_PLAN,
    special_fields=[
        TemplateField(
            name="practiceTypes",
            type="multiselect",
            label="Typy procvičování",
            options=["individuální práce", "párová práce", "skupinová práce", "celotřídní diskuse"],
        ),
        TemplateField(
            name="differentiationLevel",
            type="select",
            label="Úroveň diferenciace",
            options=["žádná", "základní", "pokročilá"],
        ),
    ],
    prompt_modifications=_append(
        "Vytvoř různorodé aktivity pro procvičení",
        "Zahrň možnosti pro různé úrovně studentů",
        "Poskytni dostatek příležitostí k aplikaci znalostí",
    ),
)

REVIEW_LESSON = MaterialSubtype(
    id="review-lesson",
    name="Opakovací hodina",
    description="Shrnutí a opakování před testem",
    parent_type=MaterialType.LESSON_PLAN,
    special_fields=[
        TemplateField(
            name="reviewScope",
            type="select",
            label="Rozsah opakování",
            options=["poslední hodina", "týden", "kapitola", "celé období"],
        ),
        TemplateField(
            name="reviewMethods",
            type="multiselect",
            label="Metody opakování",
            options=["kvíz", "diskuse", "myšlenková mapa", "prezentace", "hry"],
        ),
    ],
    prompt_modifications=_append(
        "Zaměř se na klíčové koncepty a dovednosti",
        "Vytvoř interaktivní aktivity pro opakování",
        "Identifikuj a vyřeš časté chyby studentů",
    ),
)


# =============================================================================
# PROJECT
# =============================================================================

RESEARCH_PROJECT = MaterialSubtype(
    id="research-project",
    name="Výzkumný projekt",
    description="Projekt zaměřený na výzkum a analýzu",
    parent_type=MaterialType.PROJECT,
    special_fields=[
        TemplateField(
            name="researchMethods",
            type="multiselect",
            label="Výzkumné metody",
            options=["literatura", "dotazník", "rozhovor", "pozorování", "experiment"],
        ),
        TemplateField(name="sourcesRequired", type="number", label="Minimální počet zdrojů"),
    ],
    prompt_modifications=_append(
        "Zaměř se na vědecký přístup k výzkumu",
        "Zahrň metodologii a analýzu dat",
        "Poskytni pokyny pro citování zdrojů",
    ),
)

CREATIVE_PROJECT = MaterialSubtype(
    id="creative-project",
    name="Kreativní projekt",
    description="Projekt podporující kreativitu a originalitu",
    parent_type=MaterialType.PROJECT,
    special_fields=[
        TemplateField(
            name="mediumTypes",
            type="multiselect",
            label="Typy médií",
            options=["text", "obrázky", "video", "audio", "interaktivní", "fyzický model"],
        ),
        TemplateField(
            name="originalityLevel",
            type="select",
            label="Požadavek na originalitu",
            options=["adaptace", "modifikace", "originální tvorba"],
        ),
    ],
    prompt_modifications=_append(
        "Podporuj kreativní myšlení a originalitu",
        "Poskytni prostor pro osobní vyjádření",
        "Zahrň různé možnosti prezentace",
    ),
)

GROUP_PROJECT = MaterialSubtype(
    id="group-project",
    name="Skupinový projekt",
    description="Projekt pro týmovou spolupráci",
    parent_type=MaterialType.PROJECT,
    special_fields=[
        TemplateField(
            name="groupSize",
            type="select",
            label="Velikost skupiny",
            options=["2-3 studenti", "4-5 studentů", "6-8 studentů", "celá třída"],
        ),
        TemplateField(name="roleAssignment", type="boolean", label="Definovat role ve skupině"),
    ],
    prompt_modifications=_append(
        "Zaměř se na spolupráci a komunikaci",
        "Definuj jasné role a odpovědnosti",
        "Zahrň mechanismy pro řešení konfliktů",
    ),
)


# =============================================================================
# PRESENTATION
# =============================================================================

LECTURE_SLIDES = MaterialSubtype(
    id="lecture-slides",
    name="Přednáškové slidy",
    description="Slidy pro výuku učitelem",
    parent_type=MaterialType.PRESENTATION,
    special_fields=[
        TemplateField(
            name="interactionLevel",
            type="select",
            label="Úroveň interakce",
            options=["pasivní sledování", "občasné otázky", "aktivní zapojení"],
        ),
        TemplateField(
            name="visualDensity",
            type="select",
            label="Hustota obsahu",
            options=["minimalistické", "vyvážené", "detailní"],
        ),
    ],
    prompt_modifications=_append(
        "Vytvoř jasné a přehledné slidy pro výuku",
        "Zahrň klíčové body a vizuální podporu",
        "Poskytni poznámky pro učitele",
    ),
)

STUDENT_PRESENTATION = MaterialSubtype(
    id="student-presentation",
    name="Studentská prezentace",
    description="Šablona pro prezentace studentů",
    parent_type=MaterialType.PRESENTATION,
    special_fields=[
        TemplateField(
            name="guidanceLevel",
            type="select",
            label="Úroveň vedení",
            options=["detailní pokyny", "základní struktura", "volná forma"],
        ),
        TemplateField(name="presentationSkills", type="boolean", label="Zahrnout tipy pro prezentování"),
    ],
    prompt_modifications=_append(
        "Vytvoř šablonu vhodnou pro studenty",
        "Zahrň pokyny pro efektivní prezentování",
        "Poskytni jasnou strukturu a časový plán",
    ),
)

INTERACTIVE_PRESENTATION = MaterialSubtype(
    id="interactive-presentation",
    name="Interaktivní prezentace",
    description="Prezentace s aktivním zapojením publika",
    parent_type=MaterialType.PRESENTATION,
    special_fields=[
        TemplateField(
            name="interactionTypes",
            type="multiselect",
            label="Typy interakce",
            options=["otázky", "hlasování", "diskuse", "aktivity", "kvízy"],
        ),
        TemplateField(
            name="technologyLevel",
            type="select",
            label="Úroveň technologií",
            options=["bez technologií", "základní nástroje", "pokročilé nástroje"],
        ),
    ],
    prompt_modifications=_append(
        "Zahrň interaktivní prvky pro zapojení publika",
        "Vytvoř příležitosti pro diskusi a otázky",
        "Navrhni aktivity podporující učení",
    ),
)


# =============================================================================
# ACTIVITY
# =============================================================================

WARMUP_ACTIVITY = MaterialSubtype(
    id="warmup-activity",
    name="Zahřívací aktivita",
    description="Krátká aktivita na začátek hodiny",
    parent_type=MaterialType.ACTIVITY,
    special_fields=[
        TemplateField(
            name="energyLevel",
            type="select",
            label="Úroveň energie",
            options=["klidná", "mírně aktivní", "velmi aktivní"],
        ),
        TemplateField(
            name="connectionToLesson",
            type="select",
            label="Spojení s hodinou",
            options=["přímé", "nepřímé", "obecné"],
        ),
    ],
    prompt_modifications=_append(
        "Vytvoř krátkou a poutavou aktivitu",
        "Zaměř se na motivaci a přípravu na učení",
        "Navažuj na téma hodiny",
    ),
)

MAIN_ACTIVITY = MaterialSubtype(
    id="main-activity",
    name="Hlavní aktivita",
    description="Ústřední aktivita hodiny",
    parent_type=MaterialType.ACTIVITY,
    special_fields=[
        TemplateField(
            name="learningStyle",
            type="multiselect",
            label="Styly učení",
            options=["vizuální", "auditivní", "kinestetický", "čtení/psaní"],
        ),
        TemplateField(
            name="complexityLevel",
            type="select",
            label="Úroveň složitosti",
            options=["jednoduchá", "střední", "složitá", "velmi složitá"],
        ),
    ],
    prompt_modifications=_append(
        "Vytvoř aktivitu podporující hlavní cíle hodiny",
        "Zahrň různé styly učení",
        "Poskytni jasné instrukce a očekávané výsledky",
    ),
)

CLOSING_ACTIVITY = MaterialSubtype(
    id="closing-activity",
    name="Závěrečná aktivita",
    description="Aktivita pro ukončení hodiny",
    parent_type=MaterialType.ACTIVITY,
    special_fields=[
        TemplateField(
            name="reflectionLevel",
            type="select",
            label="Úroveň reflexe",
            options=["žádná", "základní", "hluboká"],
        ),
        TemplateField(
            name="summaryType",
            type="select",
            label="Typ shrnutí",
            options=["učitel shrne", "studenti shrnou", "společné shrnutí"],
        ),
    ],
    prompt_modifications=_append(
        "Vytvoř aktivitu pro shrnutí a reflexi",
        "Zaměř se na upevnění klíčových poznatků",
        "Poskytni prostor pro otázky a zpětnou vazbu",
    ),
)


PREDEFINED_SUBTYPES: List[MaterialSubtype] = [
    PRACTICE_PROBLEMS,
    HOMEWORK_ASSIGNMENT,
    ASSESSMENT_WORKSHEET,
    FORMATIVE_ASSESSMENT,
    SUMMATIVE_TEST,
    DIAGNOSTIC_ASSESSMENT,
    INTRODUCTION_LESSON,
    PRACTICE_LESSON,
    REVIEW_LESSON,
    RESEARCH_PROJECT,
    CREATIVE_PROJECT,
    GROUP_PROJECT,
    LECTURE_SLIDES,
    STUDENT_PRESENTATION,
    INTERACTIVE_PRESENTATION,
    WARMUP_ACTIVITY,
    MAIN_ACTIVITY,
    CLOSING_ACTIVITY,
]


# =============================================================================
# SUBTYPE REGISTRY
# =============================================================================

class SubtypeRegistry:
    """Registry for managing material subtypes."""

    _subtypes: Dict[str, MaterialSubtype] = {subtype.id: subtype for subtype in PREDEFINED_SUBTYPES}

    @classmethod
    def get(cls, subtype_id: str) -> Optional[MaterialSubtype]:
        """Get a subtype by ID."""
        return cls._subtypes.get(subtype_id)

    @classmethod
    def get_by_type(cls, material_type) -> List[MaterialSubtype]:
        """All subtypes of a material type; [] for unknown types."""
        parsed = MaterialType.parse(material_type)
        if parsed is None:
            return []
        return [s for s in cls._subtypes.values() if s.parent_type == parsed]

    @classmethod
    def register(cls, subtype: MaterialSubtype) -> None:
        """Register a custom subtype (replaces one with the same ID)."""
        cls._subtypes[subtype.id] = subtype

    @classmethod
    def list_all(cls) -> List[MaterialSubtype]:
        return list(cls._subtypes.values())

    @classmethod
    def list_ids(cls) -> List[str]:
        return list(cls._subtypes.keys())


def get_subtypes_for_material(material_type) -> List[MaterialSubtype]:
    """Get the subtypes offered for a material type."""
    return SubtypeRegistry.get_by_type(material_type)
