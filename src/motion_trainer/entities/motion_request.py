"""Motion request domain entities."""

from dataclasses import dataclass, field
from typing import Literal

ActionType = Literal["insert", "delete", "replace"]
UserLevel = Literal["beginner", "intermediate", "advanced"]


@dataclass(frozen=True)
class Position:
    """Zero-based cursor position."""

    line: int
    character: int


@dataclass(frozen=True)
class SuggestionContext:
    """An editor suggestion the user needs to navigate to."""

    id: str
    current_position: Position
    target_position: Position
    action_type: ActionType
    suggestion_text: str = ""
    document_uri: str = ""
    timestamp: float = 0.0


@dataclass(frozen=True)
class CodeContext:
    """Code around the suggestion, given to the model for context."""

    current_line: str
    target_line: str
    surrounding_lines: tuple[str, ...] = field(default_factory=tuple)
    language: str = "plaintext"
    file_name: str = ""


@dataclass(frozen=True)
class MotionRequest:
    """Everything a provider needs to compute a motion."""

    context: SuggestionContext
    code_context: CodeContext
    user_level: UserLevel = "intermediate"
