"""
Custom Questions Builder - poster-authored application questions

State:
    - questions: the committed, ordered list submitted with the posting
    - draft: one in-progress question plus the option text being typed

There is no separate "add" step. Every edit to the draft re-checks it:
a valid draft is upserted into the committed list (keeping its position,
or appended), an invalid one is removed from it. The committed list is
therefore always exactly what applicants will be asked.

A draft is valid when its prompt is non-empty and, for choice questions
(dropdown / single choice / multiple choice), it has at least one option,
counting the option currently being typed.

Positions (`order`) are renumbered 0..n-1 after every structural change.
"""

from typing import List, Optional

from jobboard.schemas.question import (
    CHOICE_TYPES,
    CustomQuestion,
    QuestionBuilderState,
    QuestionDraft,
)


class QuestionBuilderError(ValueError):
    """Raised for edits that would leave a committed question invalid."""


def _committed_copy(draft: QuestionDraft) -> CustomQuestion:
    question = draft.question.model_copy(deep=True)
    question.question = question.question.strip()
    pending = draft.pending_option.strip()
    if question.type in CHOICE_TYPES and pending:
        question.options = [*question.options, pending]
    if question.type not in CHOICE_TYPES:
        question.options = []
    return question


def is_valid_question(question: CustomQuestion) -> bool:
    if not question.question.strip():
        return False
    if question.type in CHOICE_TYPES and not question.options:
        return False
    return True


class QuestionBuilder:
    def __init__(
        self,
        questions: Optional[List[CustomQuestion]] = None,
        draft: Optional[QuestionDraft] = None,
    ):
        self.questions: List[CustomQuestion] = list(questions or [])
        self.draft: QuestionDraft = draft or QuestionDraft()
        self._renumber()

    # ==================== Persistence ====================

    @classmethod
    def from_posting(cls, posting) -> "QuestionBuilder":
        questions = [CustomQuestion.model_validate(q) for q in (posting.custom_questions or [])]
        questions.sort(key=lambda q: q.order)
        draft = QuestionDraft.model_validate(posting.question_draft) if posting.question_draft else None
        return cls(questions, draft)

    def apply_to(self, posting) -> None:
        """Write the committed list (None when empty) and the draft slot to a posting."""
        posting.custom_questions = [q.model_dump() for q in self.questions] or None
        posting.question_draft = self.draft.model_dump()

    def state(self) -> QuestionBuilderState:
        return QuestionBuilderState(
            questions=self.questions,
            draft=self.draft,
            draft_valid=self.draft_is_valid(),
        )

    # ==================== Draft ====================

    def draft_is_valid(self) -> bool:
        return is_valid_question(_committed_copy(self.draft))

    def edit_draft(
        self,
        question: Optional[str] = None,
        type: Optional[str] = None,
        required: Optional[bool] = None,
        options: Optional[List[str]] = None,
        pending_option: Optional[str] = None,
    ) -> None:
        current = self.draft.question
        if question is not None:
            current.question = question
        if type is not None:
            current.type = type
            if type not in CHOICE_TYPES:
                current.options = []
                self.draft.pending_option = ""
        if required is not None:
            current.required = required
        if options is not None:
            current.options = [o.strip() for o in options if o.strip()]
        if pending_option is not None:
            self.draft.pending_option = pending_option
        self._sync_draft()

    def commit_pending_option(self) -> None:
        option = self.draft.pending_option.strip()
        if not option:
            return
        self.draft.question.options.append(option)
        self.draft.pending_option = ""
        self._sync_draft()

    def remove_draft_option(self, index: int) -> None:
        options = self.draft.question.options
        if 0 <= index < len(options):
            del options[index]
        self._sync_draft()

    def new_draft(self) -> None:
        """Start a fresh draft; the previous one stays committed if it was valid."""
        self.draft = QuestionDraft()

    def _sync_draft(self) -> None:
        draft_id = self.draft.question.id
        index = self._index(draft_id)
        if self.draft_is_valid():
            committed = _committed_copy(self.draft)
            if index is None:
                self.questions.append(committed)
            else:
                self.questions[index] = committed
        elif index is not None:
            del self.questions[index]
        self._renumber()

    # ==================== Committed questions ====================

    def move(self, question_id: str, direction: str) -> None:
        index = self._require(question_id)
        swap = index - 1 if direction == "up" else index + 1
        if swap < 0 or swap >= len(self.questions):
            return
        self.questions[index], self.questions[swap] = self.questions[swap], self.questions[index]
        self._renumber()

    def update(
        self,
        question_id: str,
        question: Optional[str] = None,
        type: Optional[str] = None,
        required: Optional[bool] = None,
    ) -> None:
        if question_id == self.draft.question.id:
            self.edit_draft(question=question, type=type, required=required)
            return

        index = self._require(question_id)
        updated = self.questions[index].model_copy(deep=True)
        if question is not None:
            updated.question = question.strip()
        if type is not None:
            updated.type = type
            if type not in CHOICE_TYPES:
                updated.options = []
        if required is not None:
            updated.required = required
        self._replace(index, updated)

    def add_option(self, question_id: str, option: str) -> None:
        option = option.strip()
        if not option:
            return
        if question_id == self.draft.question.id:
            self.draft.question.options.append(option)
            self._sync_draft()
            return

        index = self._require(question_id)
        updated = self.questions[index].model_copy(deep=True)
        updated.options.append(option)
        self._replace(index, updated)

    def remove_option(self, question_id: str, option_index: int) -> None:
        if question_id == self.draft.question.id:
            self.remove_draft_option(option_index)
            return

        index = self._require(question_id)
        updated = self.questions[index].model_copy(deep=True)
        if not 0 <= option_index < len(updated.options):
            raise QuestionBuilderError("Option not found")
        del updated.options[option_index]
        self._replace(index, updated)

    def remove(self, question_id: str) -> None:
        index = self._require(question_id)
        del self.questions[index]
        if question_id == self.draft.question.id:
            self.new_draft()
        self._renumber()

    # ==================== Helpers ====================

    def _replace(self, index: int, question: CustomQuestion) -> None:
        if not question.question:
            raise QuestionBuilderError("Question text is required")
        if question.type in CHOICE_TYPES and not question.options:
            raise QuestionBuilderError("Choice questions need at least one option")
        self.questions[index] = question
        self._renumber()

    def _index(self, question_id: str) -> Optional[int]:
        for i, q in enumerate(self.questions):
            if q.id == question_id:
                return i
        return None

    def _require(self, question_id: str) -> int:
        index = self._index(question_id)
        if index is None:
            raise QuestionBuilderError("Question not found")
        return index

    def _renumber(self) -> None:
        for i, q in enumerate(self.questions):
            q.order = i
