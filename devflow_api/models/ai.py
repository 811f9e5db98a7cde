"""
ai.py: Pydantic models for the AI routes.

Request bodies are validated by FastAPI; a failure becomes a 400 listing
every violated field (see core/errors.py). Results are wrapped in
ApiResult so success and failure share one envelope.
"""

from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

Language = Literal["typescript", "javascript", "python", "go", "rust", "java", "php", "csharp"]

SuggestMode = Literal[
    "variable-name",
    "regex-generate",
    "commit-message",
    "cron-generate",
    "json-explain",
    "base64-explain",
    "dto-optimize",
    "http-explain",
    "tailwind-optimize",
    "cost-advise",
]

NameType = Literal[
    "variable", "function", "class", "constant", "interface",
    "type", "enum", "component", "hook", "file", "css-class",
]

RefineGoal = Literal["clarity", "specificity", "conciseness"]

TokenizerModel = Literal["gpt-4o", "gpt-4", "gpt-3.5-turbo", "cl100k_base", "o200k_base"]


# ── Envelope ──────────────────────────────────────────────────────────────────

class ApiResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    error: Optional[str] = None


# ── Code review ───────────────────────────────────────────────────────────────

class ReviewRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=50_000, description="Source code to review")
    language: Language


class ReviewIssue(BaseModel):
    line: int = 0
    severity: Literal["critical", "warning", "info"] = "info"
    category: str = ""
    message: str = ""
    suggestion: str = ""


class ReviewResult(BaseModel):
    issues: list[ReviewIssue]
    score: float     # 0–100, display only
    suggestions: list[str]
    refactored_code: str


# ── Suggestions (names, regexes, commit messages, ...) ───────────────────────

class SuggestRequest(BaseModel):
    context: str = Field(..., min_length=1, max_length=5_000, description="What to suggest for")
    type: Optional[NameType] = None
    language: Optional[Language] = None
    mode: SuggestMode


class Suggestion(BaseModel):
    value: str
    score: float = 50
    reasoning: str = ""


class SuggestResult(BaseModel):
    suggestions: list[Suggestion]


# ── Prompt refinement ─────────────────────────────────────────────────────────

class RefineRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=10_000, description="Prompt to refine")
    goal: RefineGoal


class RefineResult(BaseModel):
    refined_prompt: str
    changelog: list[str]
    score: float


# ── Tokenization ──────────────────────────────────────────────────────────────

class TokenizeRequest(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    text: str = Field(..., min_length=1, max_length=100_000, description="Text to tokenize")
    model: TokenizerModel


class TokenSegment(BaseModel):
    text: str
    token_id: int


class TokenizeResult(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    segments: list[TokenSegment]
    total_tokens: int
    model: str


# ── Status ────────────────────────────────────────────────────────────────────

class QuotaLimits(BaseModel):
    rpm: int
    daily_tokens: int


class AIStatusResult(BaseModel):
    configured: bool           # always True: the keyless fallback exists
    provider: str              # what a non-BYOK request would use
    premium_configured: bool   # any server key set
    limits: QuotaLimits
