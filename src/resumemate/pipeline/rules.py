"""Declarative rule tables used by the scorer, quality gate and consistency validator.

Each catalogue is plain data (pattern, category/name, weight) so the
heuristics can be extended without touching the scoring or repair code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class TermRule:
    """Catalogue pattern that extracts atomic skill/tech terms."""

    pattern: re.Pattern
    category: str


@dataclass(frozen=True)
class PatternRule:
    name: str
    pattern: re.Pattern
    weight: float = 1.0


@dataclass(frozen=True)
class PenaltyRule:
    """Formatting deduction: ``per_item`` points per offending item, capped."""

    name: str
    per_item: int
    cap: int


@dataclass(frozen=True)
class ToneRule:
    pattern: re.Pattern
    replacement: str


def _terms(category: str, alternation: str) -> TermRule:
    # Lookarounds instead of \b so terms like "C++", "C#" and ".NET" match.
    return TermRule(
        pattern=re.compile(rf"(?<![\w.+#])(?:{alternation})(?![\w+#])", re.IGNORECASE),
        category=category,
    )


# ── Skill-term catalogue ──

TERM_CATALOGUE: tuple[TermRule, ...] = (
    _terms("languages", r"JavaScript|TypeScript|Python|Java|C\+\+|C#|Go|Golang|Rust|Ruby|PHP|Swift|Kotlin|Scala|MATLAB"),
    _terms("frontend", r"React|Angular|Vue|Svelte|Next\.?js|Nuxt|Gatsby|Remix|HTML|CSS|SASS|SCSS|Tailwind|Bootstrap"),
    _terms("backend", r"Node\.?js|Express|Django|Flask|FastAPI|Spring|Rails|Laravel|\.NET|ASP\.NET"),
    _terms("cloud", r"AWS|GCP|Azure|Google Cloud|Amazon Web Services"),
    _terms("devops", r"Docker|Kubernetes|K8s|Terraform|Pulumi|Ansible|CloudFormation"),
    _terms("devops", r"CI/CD|GitHub Actions|Jenkins|CircleCI|GitLab CI"),
    _terms("databases", r"PostgreSQL|Postgres|MySQL|MongoDB|Redis|Elasticsearch|DynamoDB|Cassandra|SQLite"),
    _terms("apis", r"GraphQL|REST|gRPC|WebSocket|microservices"),
    _terms("messaging", r"Kafka|RabbitMQ|SQS|Pub/Sub"),
    _terms("ml", r"TensorFlow|PyTorch|Scikit-learn|NLP|Machine Learning|Deep Learning|LLM"),
    _terms("systems", r"Linux|Unix|Bash|Shell|PowerShell"),
    _terms("data", r"SQL|NoSQL|ETL|Data Pipelines?|Data Engineering"),
    _terms("security", r"OAuth|JWT|SAML|SSO|Authentication|Authorization"),
    _terms("process", r"Git|Agile|Scrum|Kanban|Jira|Confluence"),
    _terms("design", r"Figma|Sketch|Photoshop|InDesign|Storybook"),
    _terms("analytics", r"Excel|Power BI|Tableau|Looker|Google Analytics|SEO|SEM"),
    _terms("business", r"Salesforce|HubSpot|SAP|Workday"),
    _terms("certifications", r"PRINCE2|PMP|ITIL|Six Sigma"),
    _terms("leadership", r"leadership|mentoring|coaching|team lead|stakeholder management|project management|product management"),
    _terms("engineering", r"system design|architecture|scalability|distributed systems|observability|monitoring"),
    _terms("quality", r"TDD|BDD|unit testing|integration testing|e2e|QA"),
    _terms("compliance", r"GDPR|SOC\s*2|HIPAA|PCI"),
    _terms("finance", r"budgeting|forecasting|financial modelling|risk management|audit"),
    _terms("healthcare", r"patient care|clinical|triage|wound care|medication administration"),
)

# Equivalent spellings. Matching any member of a group matches them all.
SYNONYM_GROUPS: tuple[frozenset[str], ...] = (
    frozenset({"kubernetes", "k8s"}),
    frozenset({"google cloud", "gcp", "google cloud platform"}),
    frozenset({"aws", "amazon web services"}),
    frozenset({"javascript", "js", "ecmascript"}),
    frozenset({"typescript", "ts"}),
    frozenset({"node.js", "nodejs", "node"}),
    frozenset({"next.js", "nextjs"}),
    frozenset({"react", "react.js", "reactjs"}),
    frozenset({"postgresql", "postgres"}),
    frozenset({"go", "golang"}),
    frozenset({"machine learning", "ml"}),
    frozenset({"ci/cd", "cicd", "continuous integration"}),
    frozenset({"rest", "rest api", "rest apis", "restful"}),
    frozenset({"graphql", "graph ql"}),
    frozenset({"microservices", "microservice"}),
    frozenset({"data pipeline", "data pipelines"}),
)

# Requirement entries at or below these bounds are used as terms themselves
# when the catalogue finds nothing in them.
SHORT_REQUIREMENT_WORDS = 4
SHORT_REQUIREMENT_CHARS = 40

# ── Bullet signals ──

METRIC_RULES: tuple[PatternRule, ...] = (
    PatternRule("percentage", re.compile(r"\d+(?:\.\d+)?\s*%")),
    PatternRule("currency", re.compile(r"[$€£¥]\s?\d[\d,.]*|\b\d[\d,.]*\s?(?:usd|eur|gbp|dollars)\b", re.IGNORECASE)),
    PatternRule("multiplier", re.compile(r"\b\d+(?:\.\d+)?\s?x\b", re.IGNORECASE)),
    PatternRule("magnitude", re.compile(r"\b\d+(?:\.\d+)?\s?[kmb]\b\+?", re.IGNORECASE)),
    PatternRule(
        "scale",
        re.compile(
            r"\b\d[\d,.]*\+?\s*(?:users|customers|clients|transactions|requests|engineers|people|"
            r"members|stores|countries|markets|accounts|patients|students|projects|services|ms|"
            r"hours|days|weeks|months|million|billion|thousand)\b",
            re.IGNORECASE,
        ),
    ),
)

SOFT_SKILL_VERBS = re.compile(
    r"\b(led|managed|mentored|coached|directed|supervised|coordinated|headed|oversaw|guided|"
    r"trained|recruited|hired|communicated|collaborated|facilitated|negotiated|presented|"
    r"influenced|motivated|empowered|delegated|resolved|mediated)\b",
    re.IGNORECASE,
)

VAGUE_OPENERS = re.compile(
    r"^(utilized|various|responsible for|helped|worked on|assisted|participated in|"
    r"involved in|was part of|tasked with|handled|dealt with)\b",
    re.IGNORECASE,
)

# Replacement openers used in blocker before/after examples.
OPENER_UPGRADES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"^Responsible for\s+", re.IGNORECASE), "Led "),
    (re.compile(r"^Helped\s+", re.IGNORECASE), "Drove "),
    (re.compile(r"^Worked on\s+", re.IGNORECASE), "Developed "),
    (re.compile(r"^Assisted\s+(?:with\s+)?", re.IGNORECASE), "Delivered "),
    (re.compile(r"^Participated in\s+", re.IGNORECASE), "Contributed to "),
    (re.compile(r"^Involved in\s+", re.IGNORECASE), "Drove "),
)

# ── Formatting deductions ──

MAX_BULLET_CHARS = 150
MIN_BULLET_CHARS = 30
MAX_SKILL_COUNT = 25
FORMATTING_FLOOR = 10

FORMATTING_PENALTIES: dict[str, PenaltyRule] = {
    "long_bullet": PenaltyRule("long_bullet", per_item=3, cap=15),
    "vague_opener": PenaltyRule("vague_opener", per_item=5, cap=15),
    "short_bullet": PenaltyRule("short_bullet", per_item=3, cap=10),
    "missing_summary": PenaltyRule("missing_summary", per_item=15, cap=15),
    "missing_education": PenaltyRule("missing_education", per_item=10, cap=10),
    "skill_overload": PenaltyRule("skill_overload", per_item=10, cap=10),
}

# ── Quality gate tables ──

BANNED_PHRASES: tuple[str, ...] = (
    # Filler
    "resulting in measurable performance improvements",
    "resulting in measurable improvements",
    "measurable performance improvements",
    "resulting in significant improvements",
    "driving measurable improvements",
    "in a dynamic environment",
    "in a fast-paced environment",
    "leveraging best practices",
    "utilizing industry best practices",
    "spearheaded synergies",
    "drove alignment across",
    "in cross-functional collaboration with stakeholders",
    # Template cover letter phrases
    "I am writing to express my strong interest",
    "What excites me most",
    "I would welcome the opportunity to discuss",
    "I am eager to contribute",
    "I am confident in my ability",
    # Generic
    "various projects",
    "multiple tasks",
    "day-to-day operations",
)

DANGLING_ENDINGS: tuple[re.Pattern, ...] = (
    re.compile(r",?\s*\b(?:which led to|which resulted in|which enabled|which drove)\s*\.?\s*$", re.IGNORECASE),
    re.compile(
        r",?\s*\b(?:leading to|resulting in|delivering|achieving|enabling|driving|ensuring)\s*\.?\s*$",
        re.IGNORECASE,
    ),
)

GREETING_PATTERN = re.compile(r"^(dear\s|hi\s|hello\s|to\s+whom)", re.IGNORECASE)
SIGNOFF_PATTERN = re.compile(
    r"^(sincerely|regards|best\s+regards|warm\s+regards|kind\s+regards|thank\s+you|yours|cheers)",
    re.IGNORECASE,
)

# Ordered; the first phrase present in a bullet's ending is rewritten.
OUTCOME_SYNONYMS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("improved", ("strengthened", "enhanced", "elevated", "advanced")),
    ("increased", ("boosted", "grew", "raised", "expanded")),
    ("reduced", ("lowered", "decreased", "minimized", "cut")),
    ("resulting in", ("leading to", "achieving", "yielding", "delivering")),
    ("across the", ("throughout the", "spanning the", "within the")),
    ("for the team", ("for the engineering group", "across the team", "organization-wide")),
    ("and reliability", ("and system stability", "and uptime", "and resilience")),
    ("and performance", ("and throughput", "and responsiveness", "and efficiency")),
    ("and efficiency", ("and productivity", "and cost savings", "and speed")),
)

# ── Consistency tables ──

TONE_RULES: tuple[ToneRule, ...] = (
    ToneRule(re.compile(r"\bweak match\b", re.IGNORECASE), "opportunity for improvement"),
    ToneRule(re.compile(r"\blacks?\s+experience\b", re.IGNORECASE), "could further emphasize experience"),
    ToneRule(re.compile(r"\bmissing leadership\b", re.IGNORECASE), "opportunity to highlight leadership"),
    ToneRule(re.compile(r"\bunderqualified\b", re.IGNORECASE), "could strengthen alignment"),
    ToneRule(re.compile(r"\bpoor(?:ly)?\s+match(?:es|ed)?\b", re.IGNORECASE), "moderate alignment"),
    ToneRule(re.compile(r"\bno\s+relevant\s+experience\b", re.IGNORECASE), "limited direct experience shown"),
    ToneRule(re.compile(r"\bnot\s+qualified\b", re.IGNORECASE), "could strengthen qualifications"),
    ToneRule(re.compile(r"\binsufficient\b", re.IGNORECASE), "limited"),
    ToneRule(re.compile(r"\binadequate\b", re.IGNORECASE), "developing"),
    ToneRule(re.compile(r"\bfails?\s+to\b", re.IGNORECASE), "could"),
    ToneRule(re.compile(r"\bdoes\s+not\s+meet\b", re.IGNORECASE), "partially meets"),
    ToneRule(re.compile(r"\bweak\b", re.IGNORECASE), "developing"),
)

# Lines claiming a term is absent. Group "term" holds the claimed-missing term.
_TERM = r"(?P<term>\w[\w./+#-]*(?:\s+[\w./+#-]+){0,3}?)"
ABSENCE_CLAIMS: tuple[re.Pattern, ...] = (
    re.compile(rf"\bno\s+evidence\s+of\s+{_TERM}(?=\s*(?:$|,|\.|;|\s(?:in|on|from|experience)\b))", re.IGNORECASE),
    re.compile(rf"\bno\s+{_TERM}\s+(?:experience\s+)?(?:shown|demonstrated|found|present|listed|included|mentioned)\b", re.IGNORECASE),
    re.compile(rf"\bmissing\s+{_TERM}(?=\s*(?:$|,|\.|;|\s(?:from|in|on|experience|skills?)\b))", re.IGNORECASE),
    re.compile(rf"\blacks?\s+{_TERM}(?=\s*(?:$|,|\.|;|\s(?:in|on|from|experience)\b))", re.IGNORECASE),
    re.compile(rf"\bwithout\s+{_TERM}(?=\s*(?:$|,|\.|;|\s(?:in|on|experience)\b))", re.IGNORECASE),
    re.compile(rf"\bdoes\s+not\s+(?:include|mention|show|demonstrate)\s+{_TERM}(?=\s*(?:$|,|\.|;|\s(?:in|on|experience)\b))", re.IGNORECASE),
    re.compile(rf"\babsence\s+of\s+{_TERM}(?=\s*(?:$|,|\.|;|\s(?:in|on|experience)\b))", re.IGNORECASE),
)

# "Add missing technical skills: React, TypeScript"
ADD_SKILLS_ACTION = re.compile(r"\badd\s+(?:missing\s+)?(?:technical\s+)?skills?(?:\s+to\s+your\s+resume)?\s*:?\s*(?P<skills>.+)", re.IGNORECASE)

QUOTED_TERM = re.compile(r"[\"“]([^\"”]+)[\"”]")

CORE_SKILL_GROUP = re.compile(r"core|technical|primary|key", re.IGNORECASE)
ADDITIONAL_SKILLS_GROUP = "Additional Skills"
