"""
Unit tests for domain types, validation helpers and error rendering.
"""

import pytest

from talentbridge.core.errors import InvalidTransition, NotFound, StoreError, ValidationError
from talentbridge.models.domain import (
    STATUS_TRANSITIONS, ApplicationStatus, JobTarget, ListingKind, ProgramTarget, can_transition,
    make_target,
)
from talentbridge.schemas.schemas import ApplicationCreate, JobIn
from talentbridge.utils.validation import field_names_by_alias, parse_id, validate_payload

pytestmark = pytest.mark.unit

S = ApplicationStatus


class TestTransitions:
    @pytest.mark.parametrize("current,new", [
        (S.submitted, S.under_review),
        (S.under_review, S.interview),
        (S.interview, S.accepted),
        (S.interview, S.rejected),
    ])
    def test_allowed(self, current, new):
        assert can_transition(current, new)

    @pytest.mark.parametrize("current,new", [
        (S.submitted, S.interview),
        (S.submitted, S.accepted),
        (S.under_review, S.submitted),
        (S.interview, S.under_review),
        (S.submitted, S.submitted),
    ])
    def test_rejected(self, current, new):
        assert not can_transition(current, new)

    def test_terminal_states(self):
        for terminal in (S.accepted, S.rejected):
            assert STATUS_TRANSITIONS[terminal] == frozenset()

    def test_every_status_has_an_entry(self):
        assert set(STATUS_TRANSITIONS) == set(ApplicationStatus)


class TestTargets:
    def test_make_target(self):
        assert make_target(ListingKind.job, 3) == JobTarget(3)
        assert make_target("program", 4) == ProgramTarget(4)
        assert JobTarget(1) != ProgramTarget(1)
        assert ProgramTarget(9).kind is ListingKind.program


class TestParseId:
    @pytest.mark.parametrize("raw,expected", [("1", 1), (" 42 ", 42), (7, 7)])
    def test_valid(self, raw, expected):
        assert parse_id(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "0", "-3", "1e3", "٣", True, 0, 2 ** 31, None])
    def test_invalid(self, raw):
        with pytest.raises(NotFound):
            parse_id(raw, "Job not found")


class TestValidatePayload:
    def test_errors_use_wire_names(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(JobIn, {"title": "x"})
        params = {error["param"] for error in excinfo.value.errors}
        assert {"description", "jobType", "deadline"} <= params
        assert all(error["location"] == "body" for error in excinfo.value.errors)

    def test_bare_document_strings(self):
        payload = validate_payload(ApplicationCreate, {"documents": ["cv.pdf"], "cover_letter": "Hi"})
        assert payload.documents[0].url == "cv.pdf"
        assert payload.cover_letter == "Hi"

    def test_field_names_by_alias(self):
        names = field_names_by_alias(JobIn)
        assert names["jobType"] == "job_type"
        assert names["job_type"] == "job_type"


class TestErrorBodies:
    def test_from_fastapi_errors_strips_location(self):
        error = ValidationError.from_pydantic([{"loc": ("body", "status"), "msg": "Field required"}])
        assert error.to_body() == {"errors": [{"param": "status", "msg": "Field required", "location": "body"}]}

    def test_invalid_transition_body(self):
        body = InvalidTransition("accepted", "interview").to_body()
        assert body["errors"][0]["param"] == "status"
        assert InvalidTransition.status_code == 400

    def test_store_error_hides_detail(self):
        error = StoreError("insert failed", RuntimeError("connection reset"))
        assert error.to_body() == {"msg": "Server Error"}
        assert "connection reset" in str(error)
