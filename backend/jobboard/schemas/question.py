from pydantic import BaseModel, Field
from typing import Literal, Optional
import uuid

QuestionType = Literal["text", "textarea", "select", "radio", "checkbox"]

# Question kinds whose answers are picked from the option list
CHOICE_TYPES = ("select", "radio", "checkbox")


class CustomQuestion(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    question: str = ""
    type: QuestionType = "text"
    required: bool = False
    options: list[str] = Field(default_factory=list)
    order: int = 0


class QuestionDraft(BaseModel):
    """The builder's draft slot: a question plus the option text being typed."""

    question: CustomQuestion = Field(default_factory=CustomQuestion)
    pending_option: str = ""


class DraftEdit(BaseModel):
    question: Optional[str] = None
    type: Optional[QuestionType] = None
    required: Optional[bool] = None
    options: Optional[list[str]] = None
    pending_option: Optional[str] = None


class QuestionUpdate(BaseModel):
    question: Optional[str] = None
    type: Optional[QuestionType] = None
    required: Optional[bool] = None


class OptionAdd(BaseModel):
    option: str


class MoveRequest(BaseModel):
    direction: Literal["up", "down"]


class QuestionBuilderState(BaseModel):
    questions: list[CustomQuestion]
    draft: QuestionDraft
    draft_valid: bool
