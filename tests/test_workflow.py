"""
Tests for the Capture Workflow.

Tests drafting, category acceptance, idea confirmation (validation and tag
cleaning), editing and deletion against the memory store.
"""

import pytest
from unittest.mock import Mock

from sparks.capture.workflow import CaptureWorkflow, Draft, clean_tags
from sparks.errors import (
    MalformedResponseError,
    NotFoundError,
    RateLimitError,
    StoreError,
    UpstreamError,
    ValidationError,
    user_message,
)
from sparks.models.ai_result import AIResult
from sparks.storage.memory import MemoryStorage
from sparks.views.filters import ViewFilters


@pytest.fixture
def draft_fields():
    """Reviewed draft fields as submitted by the user."""
    return {
        "raw_input": "URGENT renew passport before the trip",
        "title": "Renew Passport",
        "summary": "Passport expires before the trip.",
        "category": "Travel",
        "tags": ["Travel", " passport ", ""],
        "priority": "urgent",
    }


# =============================================================================
# Test clean_tags
# =============================================================================

class TestCleanTags:
    """Tests for tag normalization on confirm/edit."""

    def test_trims_and_lowercases(self):
        assert clean_tags([" Travel ", "PASSPORT"]) == ["travel", "passport"]

    def test_drops_blanks(self):
        assert clean_tags(["a", "", "   ", None, "b"]) == ["a", "b"]

    def test_keeps_first_three(self):
        assert clean_tags(["a", "b", "c", "d", "e"]) == ["a", "b", "c"]

    def test_blanks_do_not_count_towards_limit(self):
        assert clean_tags(["", "a", " ", "b", "c", "d"]) == ["a", "b", "c"]

    def test_comma_separated_string(self):
        assert clean_tags("Travel, passport, , admin, extra") == ["travel", "passport", "admin"]

    def test_none(self):
        assert clean_tags(None) == []

    @pytest.mark.parametrize("tags", [5, {"a": 1}, ("a", "b"), ["ok", 3]])
    def test_wrong_type_rejected(self, tags):
        with pytest.raises(ValidationError) as exc_info:
            clean_tags(tags)

        assert exc_info.value.fields == ["tags"]


# =============================================================================
# Test create_draft
# =============================================================================

class TestCreateDraft:
    """Tests for drafting from raw text."""

    def test_returns_draft_with_trimmed_raw_input(self, workflow):
        draft = workflow.create_draft("  renew my passport  ")

        assert isinstance(draft, Draft)
        assert draft.raw_input == "renew my passport"
        assert draft.result.title == "Renew Passport Soon"

    def test_passes_known_categories(self, workflow, completion_client, known_categories):
        workflow.create_draft("renew my passport")

        system_prompt = completion_client.complete.call_args.args[0]
        assert ", ".join(known_categories) in system_prompt

    def test_flags_new_category(self, workflow):
        draft = workflow.create_draft("renew my passport")

        assert draft.result.category == "Travel"
        assert draft.result.is_new_category is True

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_text_rejected(self, workflow, completion_client, text):
        with pytest.raises(ValidationError):
            workflow.create_draft(text)

        completion_client.complete.assert_not_called()

    def test_rate_limit_not_retried(self, workflow, completion_client):
        completion_client.complete.side_effect = RateLimitError("quota", status_code=429)

        with pytest.raises(RateLimitError):
            workflow.create_draft("text")

        assert completion_client.complete.call_count == 1

    def test_malformed_response_propagates(self, workflow, completion_client):
        completion_client.complete.return_value = "not json at all"

        with pytest.raises(MalformedResponseError):
            workflow.create_draft("text")

    def test_draft_to_dict(self, workflow):
        draft = workflow.create_draft("renew my passport")

        data = draft.to_dict()

        assert data["raw_input"] == "renew my passport"
        assert data["isNewCategory"] is True


# =============================================================================
# Test accept_category
# =============================================================================

class TestAcceptCategory:
    """Tests for storing a newly suggested category."""

    def test_creates_category(self, workflow, memory_storage):
        category = workflow.accept_category("  Travel ")

        assert category.name == "Travel"
        assert "Travel" in memory_storage.category_names()

    def test_new_category_known_to_next_draft(self, workflow):
        workflow.accept_category("Travel")

        draft = workflow.create_draft("renew my passport")

        assert draft.result.is_new_category is False

    def test_does_not_call_model(self, workflow, completion_client):
        workflow.accept_category("Travel")

        completion_client.complete.assert_not_called()

    def test_blank_name_rejected(self, workflow):
        with pytest.raises(ValidationError):
            workflow.accept_category("  ")

    @pytest.mark.parametrize("name", [5, ["Travel"], {"name": "Travel"}])
    def test_non_text_name_rejected(self, workflow, memory_storage, name):
        before = len(memory_storage.list_categories())

        with pytest.raises(ValidationError):
            workflow.accept_category(name)

        assert len(memory_storage.list_categories()) == before


# =============================================================================
# Test confirm_idea
# =============================================================================

class TestConfirmIdea:
    """Tests for persisting a reviewed draft."""

    def test_persists_active_idea(self, workflow, draft_fields):
        idea = workflow.confirm_idea(draft_fields)

        assert idea.id
        assert idea.status == "active"
        assert idea.notes is None
        assert idea.priority == "urgent"
        assert idea.raw_input == draft_fields["raw_input"]

    def test_cleans_tags(self, workflow, draft_fields):
        idea = workflow.confirm_idea(draft_fields)

        assert idea.tags == ["travel", "passport"]

    def test_truncates_tags(self, workflow, draft_fields):
        draft_fields["tags"] = ["a", "b", "c", "d"]

        idea = workflow.confirm_idea(draft_fields)

        assert idea.tags == ["a", "b", "c"]

    def test_status_cannot_be_chosen(self, workflow, draft_fields):
        draft_fields["status"] = "archived"
        draft_fields["notes"] = "ignored"

        idea = workflow.confirm_idea(draft_fields)

        assert idea.status == "active"
        assert idea.notes is None

    @pytest.mark.parametrize("priority", [None, "", "critical"])
    def test_invalid_priority_defaults_to_normal(self, workflow, draft_fields, priority):
        draft_fields["priority"] = priority

        idea = workflow.confirm_idea(draft_fields)

        assert idea.priority == "normal"

    @pytest.mark.parametrize("field", ["title", "summary", "category", "raw_input"])
    def test_blank_required_field_rejected(self, workflow, draft_fields, memory_storage, field):
        draft_fields[field] = "   "

        with pytest.raises(ValidationError) as exc_info:
            workflow.confirm_idea(draft_fields)

        assert field in exc_info.value.fields
        assert memory_storage.count() == 0

    @pytest.mark.parametrize("field,value", [
        ("title", {"text": "Renew"}),
        ("summary", ["Passport expires."]),
        ("category", 7),
        ("raw_input", True),
    ])
    def test_non_text_field_rejected(self, workflow, draft_fields, memory_storage, field, value):
        draft_fields[field] = value

        with pytest.raises(ValidationError) as exc_info:
            workflow.confirm_idea(draft_fields)

        assert exc_info.value.fields == [field]
        assert memory_storage.count() == 0

    def test_wrong_type_tags_rejected(self, workflow, draft_fields, memory_storage):
        draft_fields["tags"] = 5

        with pytest.raises(ValidationError):
            workflow.confirm_idea(draft_fields)

        assert memory_storage.count() == 0

    def test_all_missing_fields_reported(self, workflow):
        with pytest.raises(ValidationError) as exc_info:
            workflow.confirm_idea({})

        assert exc_info.value.fields == ["raw_input", "title", "summary", "category"]

    def test_created_idea_listed_once(self, workflow, draft_fields):
        idea = workflow.confirm_idea(draft_fields)

        listed = [i.id for i in workflow.list_ideas()]

        assert listed.count(idea.id) == 1


# =============================================================================
# Test edit/delete/list
# =============================================================================

class TestEditIdea:
    """Tests for edits from the detail view."""

    def test_partial_update(self, workflow, draft_fields):
        idea = workflow.confirm_idea(draft_fields)

        updated = workflow.edit_idea(idea.id, {"status": "actioned", "notes": "Booked"})

        assert updated.status == "actioned"
        assert updated.notes == "Booked"
        assert updated.title == idea.title

    def test_raw_input_never_changes(self, workflow, draft_fields):
        idea = workflow.confirm_idea(draft_fields)

        updated = workflow.edit_idea(idea.id, {"raw_input": "rewritten", "title": "New Title"})

        assert updated.raw_input == draft_fields["raw_input"]
        assert updated.title == "New Title"

    def test_tags_cleaned(self, workflow, draft_fields):
        idea = workflow.confirm_idea(draft_fields)

        updated = workflow.edit_idea(idea.id, {"tags": "One, TWO, three, four"})

        assert updated.tags == ["one", "two", "three"]

    def test_blank_notes_become_none(self, workflow, draft_fields):
        idea = workflow.confirm_idea(draft_fields)
        workflow.edit_idea(idea.id, {"notes": "something"})

        updated = workflow.edit_idea(idea.id, {"notes": "  "})

        assert updated.notes is None

    @pytest.mark.parametrize("changes", [
        {"title": ""},
        {"summary": "   "},
        {"category": None},
        {"priority": "critical"},
        {"status": "deleted"},
        {"title": {"text": "x"}},
        {"category": 3},
        {"notes": ["a note"]},
        {"tags": 5},
    ])
    def test_invalid_changes_rejected(self, workflow, draft_fields, changes):
        idea = workflow.confirm_idea(draft_fields)

        with pytest.raises(ValidationError):
            workflow.edit_idea(idea.id, changes)

    def test_unknown_id(self, workflow):
        with pytest.raises(NotFoundError):
            workflow.edit_idea("missing", {"title": "x"})


class TestDeleteAndList:
    """Tests for deleting and listing."""

    def test_delete_then_list_excludes(self, workflow, draft_fields):
        idea = workflow.confirm_idea(draft_fields)

        workflow.delete_idea(idea.id)

        assert idea.id not in [i.id for i in workflow.list_ideas()]

    def test_list_passes_filters_to_store(self):
        storage = Mock(spec=MemoryStorage)
        storage.list_ideas.return_value = []
        workflow = CaptureWorkflow(storage, Mock())

        workflow.list_ideas(ViewFilters(category="Work", status="", priority="urgent", sort="priority"))

        storage.list_ideas.assert_called_once_with(
            category="Work", status=None, priority="urgent", sort="priority",
        )

    def test_list_without_filters_returns_every_status(self, workflow, draft_fields):
        idea = workflow.confirm_idea(draft_fields)
        workflow.edit_idea(idea.id, {"status": "archived"})

        assert [i.id for i in workflow.list_ideas()] == [idea.id]

    def test_list_and_delete_categories(self, workflow, known_categories):
        categories = workflow.list_categories()
        assert [c.name for c in categories] == known_categories

        workflow.delete_category(categories[0].id)

        assert [c.name for c in workflow.list_categories()] == known_categories[1:]

    def test_store_error_propagates(self):
        storage = Mock(spec=MemoryStorage)
        storage.category_names.side_effect = StoreError("down")
        normalizer = Mock()
        workflow = CaptureWorkflow(storage, normalizer)

        with pytest.raises(StoreError):
            workflow.create_draft("text")

        normalizer.normalize.assert_not_called()


# =============================================================================
# Test user_message
# =============================================================================

class TestUserMessage:
    """Tests for the user-visible error text."""

    def test_rate_limit_asks_to_wait(self):
        message = user_message(RateLimitError("429"))

        assert "wait" in message.lower()
        assert "try again" in message.lower()

    def test_upstream_is_retryable(self):
        assert "try again" in user_message(UpstreamError("boom")).lower()

    def test_malformed_hides_raw_output(self):
        error = MalformedResponseError("AI returned invalid JSON", "secret model text")

        assert "secret model text" not in user_message(error)
        assert error.raw_prefix == "secret model text"

    def test_validation_message_passes_through(self):
        assert user_message(ValidationError("title is required")) == "title is required"

    def test_store_error_is_generic(self):
        assert "postgres" not in user_message(StoreError("postgres exploded"))

    def test_unknown_error(self):
        assert user_message(RuntimeError("x")) == "Something went wrong."
