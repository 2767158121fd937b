"""Request DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

from motion_trainer.entities import CodeContext, MotionRequest, Position, SuggestionContext


class PositionItem(BaseModel):
    """Zero-based cursor position."""

    line: int = Field(..., ge=0)
    character: int = Field(..., ge=0)

    def to_entity(self) -> Position:
        return Position(line=self.line, character=self.character)


class SuggestionContextItem(BaseModel):
    """Editor suggestion the user needs to reach."""

    id: str = Field(..., description="Unique identifier of the suggestion", min_length=1)
    current_position: PositionItem
    target_position: PositionItem
    action_type: Literal["insert", "delete", "replace"]
    suggestion_text: str = ""
    document_uri: str = ""
    timestamp: float = 0.0


class CodeContextItem(BaseModel):
    """Code around the suggestion."""

    current_line: str
    target_line: str
    surrounding_lines: list[str] = Field(default_factory=list)
    language: str = "plaintext"
    file_name: str = ""


class ComputeMotionRequest(BaseModel):
    """Request DTO for computing a motion.

    The handler will convert this to a MotionRequest entity for the service layer.
    """

    context: SuggestionContextItem
    code_context: CodeContextItem
    user_level: Literal["beginner", "intermediate", "advanced"] = "intermediate"

    def to_entity(self) -> MotionRequest:
        context = self.context
        code = self.code_context
        return MotionRequest(
            context=SuggestionContext(
                id=context.id,
                current_position=context.current_position.to_entity(),
                target_position=context.target_position.to_entity(),
                action_type=context.action_type,
                suggestion_text=context.suggestion_text,
                document_uri=context.document_uri,
                timestamp=context.timestamp,
            ),
            code_context=CodeContext(
                current_line=code.current_line,
                target_line=code.target_line,
                surrounding_lines=tuple(code.surrounding_lines),
                language=code.language,
                file_name=code.file_name,
            ),
            user_level=self.user_level,
        )


class UpdateCacheConfigRequest(BaseModel):
    """Request DTO for reconfiguring the cache.

    Bounds are validated by the cache itself so that invalid values surface
    as configuration errors.
    """

    ttl: float | None = Field(None, description="New entry TTL in seconds (future entries only)")
    max_size: int | None = Field(None, description="New maximum number of entries")
