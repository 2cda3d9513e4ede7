"""Domain tests: sort toggling, filter normalization, pagination math, validators."""

from datetime import datetime, timezone
import uuid

import pytest

from auditlog.domain.exceptions import (
    DomainValidationError,
    InvalidMetadataError,
    InvalidSortError,
    InvalidSubjectReferenceError,
)
from auditlog.domain.models.audit_event import (
    AuditEvent,
    AuditFilters,
    Page,
    SortDirection,
    SortOrder,
)
from auditlog.domain.validators.audit_validator import (
    validate_pagination,
    validate_record_arguments,
    validate_retention_days,
)


# ---------- Sorting ----------


def test_default_sort_is_created_at_descending():
    order = SortOrder()
    assert order.column == "created_at"
    assert order.direction is SortDirection.DESC


def test_toggle_same_column_flips_direction():
    order = SortOrder(column="created_at", direction=SortDirection.ASC)
    assert order.toggled("created_at") == SortOrder("created_at", SortDirection.DESC)
    assert order.toggled("created_at").toggled("created_at") == order


def test_toggle_other_column_resets_to_ascending():
    order = SortOrder(column="created_at", direction=SortDirection.DESC)
    toggled = order.toggled("verb")
    assert toggled.column == "verb"
    assert toggled.direction is SortDirection.ASC


def test_sort_direction_accepts_plain_string():
    assert SortOrder("verb", "desc").direction is SortDirection.DESC


def test_unknown_sort_column_rejected():
    with pytest.raises(InvalidSortError):
        SortOrder(column="password")
    with pytest.raises(InvalidSortError):
        SortOrder().toggled("metadata")


def test_unknown_sort_direction_rejected():
    with pytest.raises(InvalidSortError):
        SortOrder("verb", "sideways")


# ---------- Filters and pages ----------


def test_blank_filters_are_unset():
    filters = AuditFilters(search="   ", verb="", subject_type=" Invoice ")
    assert filters.search is None
    assert filters.verb is None
    assert filters.subject_type == "Invoice"
    assert AuditFilters(search=" ").is_empty
    assert not filters.is_empty


def test_page_last_page():
    assert Page(items=[], total=51, page=3, per_page=25).last_page == 3
    assert Page(items=[], total=50, page=1, per_page=25).last_page == 2
    assert Page(items=[], total=0, page=1, per_page=25).last_page == 1


def test_audit_event_is_immutable():
    event = AuditEvent(
        id=uuid.uuid4(),
        verb="create",
        description="Created subject Mathematics",
        created_at=datetime.now(timezone.utc),
    )
    with pytest.raises(AttributeError):
        event.verb = "delete"  # type: ignore[misc]
    assert event.to_dict()["verb"] == "create"


# ---------- Validators ----------


@pytest.mark.parametrize("verb", ["", "   ", None])
def test_verb_required(verb):
    with pytest.raises(DomainValidationError):
        validate_record_arguments(verb, "desc", None, None, None)


def test_description_required():
    with pytest.raises(DomainValidationError):
        validate_record_arguments("create", " ", None, None, None)


@pytest.mark.parametrize("subject_type,subject_id", [("Invoice", None), (None, "42")])
def test_half_subject_reference_rejected(subject_type, subject_id):
    with pytest.raises(InvalidSubjectReferenceError):
        validate_record_arguments("update", "Updated invoice", subject_type, subject_id, None)


def test_metadata_must_be_json_serializable():
    with pytest.raises(InvalidMetadataError):
        validate_record_arguments("update", "desc", None, None, {"when": object()})


def test_valid_arguments_pass():
    validate_record_arguments("update", "Changed plan", "PaymentPlan", "7", {"from": 100, "to": 120})


def test_pagination_bounds():
    validate_pagination(1, 25, 100)
    with pytest.raises(DomainValidationError):
        validate_pagination(0, 25, 100)
    with pytest.raises(DomainValidationError):
        validate_pagination(1, 101, 100)


def test_retention_days_at_least_one():
    validate_retention_days(1)
    with pytest.raises(DomainValidationError):
        validate_retention_days(0)
    with pytest.raises(DomainValidationError):
        validate_retention_days(-1)
