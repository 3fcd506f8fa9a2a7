"""Dataclasses and enums for templates, requests and generation results."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Union

# Hints carried over from the max-length input; advisory only.
MAX_LENGTH_STEP = 50
MAX_LENGTH_MIN_HINT = 50

DOWNLOAD_FILENAME = "generated-documentation.md"


class TemplateId(str, Enum):
    API_ENDPOINT = "api-endpoint"
    FUNCTION_DOCSTRING = "function-docstring"
    README_SECTION = "readme-section"
    CODE_EXPLAINER = "code-explainer"
    ARCHITECTURE_OVERVIEW = "architecture-overview"


class Tone(str, Enum):
    FORMAL = "Formal"
    CONCISE = "Concise"
    BEGINNER_FRIENDLY = "Beginner-Friendly"


class SessionStatus(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class CustomizationParams:
    """
    Knobs applied uniformly across templates.

    Args:
        tone: Writing tone.
        language: Programming language context, free text.
        max_length: Approximate word-count target; must be positive.
    """
    tone: Tone = Tone.FORMAL
    language: str = "JavaScript"
    max_length: int = 250

    def __post_init__(self) -> None:
        # Accept raw strings for tone, e.g. from config files or query params.
        object.__setattr__(self, "tone", Tone(self.tone))
        if isinstance(self.max_length, bool) or not isinstance(self.max_length, int):
            raise ValueError(f"max_length must be an integer, got {self.max_length!r}")
        if self.max_length <= 0:
            raise ValueError(f"max_length must be positive, got {self.max_length}")


PromptBuilder = Callable[[str, CustomizationParams], str]


@dataclass(frozen=True)
class Template:
    id: TemplateId
    name: str
    description: str
    placeholder: str
    build_prompt: PromptBuilder = field(repr=False, compare=False)


@dataclass(frozen=True)
class GenerationRequest:
    """Snapshot taken when generate is triggered; never mutated afterwards."""
    request_id: int
    template_id: TemplateId
    params: CustomizationParams
    user_input: str


@dataclass(frozen=True)
class GenerationSuccess:
    text: str
    total_tokens: int | None = None


@dataclass(frozen=True)
class GenerationFailure:
    message: str


GenerationResult = Union[GenerationSuccess, GenerationFailure]


@dataclass(frozen=True)
class PerformanceMetrics:
    generation_time_seconds: float | None = None
    total_tokens: int | None = None

    def describe(self) -> str:
        """Render the metrics line shown under a finished generation."""
        if self.generation_time_seconds is None:
            return ""
        tokens = self.total_tokens if self.total_tokens else "N/A"
        return f"Generation time: {self.generation_time_seconds:.2f}s | Token usage: {tokens}"


@dataclass(frozen=True)
class SessionState:
    """Read-only view of the session handed to front ends."""
    status: SessionStatus
    template_id: TemplateId
    params: CustomizationParams
    user_input: str
    result: GenerationResult | None = None
    metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    @property
    def is_loading(self) -> bool:
        return self.status is SessionStatus.LOADING

    @property
    def output(self) -> str:
        return self.result.text if isinstance(self.result, GenerationSuccess) else ""

    @property
    def error(self) -> str | None:
        return self.result.message if isinstance(self.result, GenerationFailure) else None
