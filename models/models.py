from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from recommendation.logic.contracts import PrescreenAnswers, RecommendationBundle


class LanguageOption(BaseModel):
    code: str
    label: str


class ProgramOption(BaseModel):
    course_code: str
    label: str
    link: Optional[str] = None


class WidgetConfig(BaseModel):
    languages: List[LanguageOption]
    programs: List[ProgramOption]


class ChatTurn(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=4000)
    prescreen: PrescreenAnswers
    history: List[ChatTurn] = Field(default_factory=list)
    session_id: Optional[str] = None


class ChatReply(BaseModel):
    reply: str
    bundle: RecommendationBundle


class PrescreenResult(BaseModel):
    bundle: RecommendationBundle
    automation: Dict[str, Any] = Field(default_factory=dict)


LANGUAGES = [
    LanguageOption(code="en", label="English"),
    LanguageOption(code="es", label="Español"),
    LanguageOption(code="fr", label="Français"),
    LanguageOption(code="ht", label="Kreyòl Ayisyen"),
]
