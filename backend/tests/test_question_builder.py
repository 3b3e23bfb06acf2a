"""
Tests for the Custom Question Builder

Tests cover:
- Draft auto-commit (valid drafts appear, invalid ones do not)
- Pending option handling for choice questions
- Reordering and dense renumbering
- Edits to committed questions
- Persistence to and from a posting
"""

from types import SimpleNamespace

import pytest

from jobboard.schemas import CustomQuestion
from jobboard.services.question_builder import (
    QuestionBuilder,
    QuestionBuilderError,
    is_valid_question,
)


def committed(text, type="text", options=None):
    return CustomQuestion(question=text, type=type, options=options or [])


@pytest.fixture
def builder():
    return QuestionBuilder([
        committed("Why this role?"),
        committed("Preferred shift", "radio", ["Day", "Night"]),
        committed("Years of experience"),
    ])


class TestIsValidQuestion:
    def test_blank_prompt_invalid(self):
        assert not is_valid_question(committed("   "))

    def test_choice_without_options_invalid(self):
        assert not is_valid_question(committed("Pick one", "select"))

    def test_text_question_valid(self):
        assert is_valid_question(committed("Tell us about yourself", "textarea"))

    def test_choice_with_options_valid(self):
        assert is_valid_question(committed("Pick", "checkbox", ["A"]))


class TestDraft:
    def test_empty_draft_not_committed(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="   ")
        assert builder.questions == []
        assert not builder.draft_is_valid()

    def test_valid_draft_committed_immediately(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="  Why us?  ")
        assert len(builder.questions) == 1
        assert builder.questions[0].question == "Why us?"
        assert builder.questions[0].id == builder.draft.question.id

    def test_draft_edits_update_committed_copy(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="Why us?")
        builder.edit_draft(question="Why this job?", required=True)
        assert len(builder.questions) == 1
        assert builder.questions[0].question == "Why this job?"
        assert builder.questions[0].required is True

    def test_clearing_prompt_withdraws_commit(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="Why us?")
        builder.edit_draft(question="")
        assert builder.questions == []

    def test_choice_draft_needs_an_option(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="Shift", type="select")
        assert builder.questions == []

        builder.edit_draft(pending_option="Weekends")
        # The option being typed counts even before it is added
        assert len(builder.questions) == 1
        assert builder.questions[0].options == ["Weekends"]
        assert builder.draft.question.options == []

    def test_commit_pending_option(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="Shift", type="radio", pending_option=" Day ")
        builder.commit_pending_option()
        assert builder.draft.question.options == ["Day"]
        assert builder.draft.pending_option == ""
        assert builder.questions[0].options == ["Day"]

    def test_blank_pending_option_ignored(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="Shift", type="radio", pending_option="   ")
        builder.commit_pending_option()
        assert builder.draft.question.options == []
        assert builder.questions == []

    def test_removing_last_option_withdraws_commit(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="Shift", type="radio", options=["Day"])
        assert len(builder.questions) == 1
        builder.remove_draft_option(0)
        assert builder.questions == []

    def test_switching_to_text_clears_options(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="Shift", type="radio", options=["Day"], pending_option="Night")
        builder.edit_draft(type="text")
        assert builder.draft.question.options == []
        assert builder.draft.pending_option == ""
        assert builder.questions[0].options == []

    def test_new_draft_keeps_previous_commit(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="First")
        builder.new_draft()
        builder.edit_draft(question="Second")
        assert [q.question for q in builder.questions] == ["First", "Second"]

    def test_new_draft_drops_invalid_previous(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="Pick", type="select")
        builder.new_draft()
        assert builder.questions == []


class TestMove:
    def test_move_up_swaps_adjacent(self, builder):
        second = builder.questions[1].id
        builder.move(second, "up")
        assert builder.questions[0].id == second
        assert [q.order for q in builder.questions] == [0, 1, 2]

    def test_move_down_swaps_adjacent(self, builder):
        before = [q.id for q in builder.questions]
        builder.move(before[0], "down")
        assert [q.id for q in builder.questions] == [before[1], before[0], before[2]]
        assert [q.order for q in builder.questions] == [0, 1, 2]

    def test_move_past_edge_is_noop(self, builder):
        before = [q.id for q in builder.questions]
        builder.move(before[0], "up")
        builder.move(before[-1], "down")
        assert [q.id for q in builder.questions] == before

    def test_move_unknown_question(self, builder):
        with pytest.raises(QuestionBuilderError):
            builder.move("missing", "up")


class TestCommittedEdits:
    def test_update_text(self, builder):
        qid = builder.questions[0].id
        builder.update(qid, question="  Why apply?  ", required=True)
        assert builder.questions[0].question == "Why apply?"
        assert builder.questions[0].required is True

    def test_update_cannot_blank_prompt(self, builder):
        qid = builder.questions[0].id
        with pytest.raises(QuestionBuilderError):
            builder.update(qid, question="  ")
        assert builder.questions[0].question == "Why this role?"

    def test_switch_to_choice_requires_options(self, builder):
        qid = builder.questions[0].id
        with pytest.raises(QuestionBuilderError):
            builder.update(qid, type="select")

    def test_add_and_remove_option(self, builder):
        qid = builder.questions[1].id
        builder.add_option(qid, "Weekend")
        assert builder.questions[1].options == ["Day", "Night", "Weekend"]
        builder.remove_option(qid, 0)
        assert builder.questions[1].options == ["Night", "Weekend"]

    def test_cannot_remove_last_option(self):
        builder = QuestionBuilder([committed("Pick", "select", ["Only"])])
        with pytest.raises(QuestionBuilderError):
            builder.remove_option(builder.questions[0].id, 0)

    def test_remove_renumbers(self, builder):
        builder.remove(builder.questions[1].id)
        assert [q.question for q in builder.questions] == ["Why this role?", "Years of experience"]
        assert [q.order for q in builder.questions] == [0, 1]

    def test_removing_draft_question_resets_draft(self):
        builder = QuestionBuilder()
        builder.edit_draft(question="Why us?")
        builder.remove(builder.draft.question.id)
        assert builder.questions == []
        assert builder.draft.question.question == ""


class TestPersistence:
    def test_round_trip_through_posting(self):
        posting = SimpleNamespace(custom_questions=None, question_draft=None)
        builder = QuestionBuilder.from_posting(posting)
        builder.edit_draft(question="Why us?")
        builder.apply_to(posting)

        assert posting.custom_questions[0]["question"] == "Why us?"
        assert posting.question_draft["question"]["question"] == "Why us?"

        restored = QuestionBuilder.from_posting(posting)
        assert [q.question for q in restored.questions] == ["Why us?"]
        assert restored.draft.question.id == builder.draft.question.id

    def test_empty_list_stored_as_none(self):
        posting = SimpleNamespace(custom_questions=None, question_draft=None)
        QuestionBuilder.from_posting(posting).apply_to(posting)
        assert posting.custom_questions is None

    def test_from_posting_sorts_by_order(self):
        posting = SimpleNamespace(
            custom_questions=[
                {"id": "b", "question": "Second", "type": "text", "order": 1},
                {"id": "a", "question": "First", "type": "text", "order": 0},
            ],
            question_draft=None,
        )
        builder = QuestionBuilder.from_posting(posting)
        assert [q.id for q in builder.questions] == ["a", "b"]

    def test_state_reports_draft_validity(self):
        builder = QuestionBuilder()
        assert builder.state().draft_valid is False
        builder.edit_draft(question="Why us?")
        assert builder.state().draft_valid is True
