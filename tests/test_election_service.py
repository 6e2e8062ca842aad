"""Election and candidate administration tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from app.schemas.election import CandidateCreate, CandidateUpdate, ElectionCreate, ElectionUpdate
from app.services.candidate_service import CandidateService
from app.services.election_service import ElectionService
from app.services.vote_service import VoteService
from app.services.voting_rules import ElectionPhase
from app.utils.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    StoreUnavailableError,
)


def _payload(**overrides) -> ElectionCreate:
    values = {
        "title": "Student Council 2024",
        "description": "Annual student council election",
        "start_date": datetime(2024, 1, 1, tzinfo=UTC),
        "end_date": datetime(2024, 1, 8, tzinfo=UTC),
    }
    values.update(overrides)
    return ElectionCreate(**values)


def test_create_election_requires_admin(store, student) -> None:
    with pytest.raises(ForbiddenError):
        ElectionService(store).create(student, _payload())
    assert store.rows("elections") == []


def test_create_election_stores_no_status(store, admin) -> None:
    """Phase is returned with the election but never written to the store."""
    election = ElectionService(store).create(admin, _payload())

    assert election["phase"] == ElectionPhase.COMPLETED
    assert election["created_by"] == admin.id
    assert "phase" not in store.rows("elections")[0]
    assert "status" not in store.rows("elections")[0]


def test_election_window_must_end_after_start() -> None:
    with pytest.raises(ValueError, match="End date must be after start date"):
        _payload(end_date=datetime(2024, 1, 1, tzinfo=UTC))


def test_department_elections_need_a_department() -> None:
    with pytest.raises(ValueError, match="Department is required"):
        _payload(type="department")


@pytest.mark.parametrize("field", ["title", "description"])
def test_whitespace_only_election_text_is_rejected(field: str) -> None:
    with pytest.raises(ValueError, match=field):
        _payload(**{field: "            "})
    with pytest.raises(ValueError, match=field):
        ElectionUpdate(**{field: "            "})


def test_election_text_is_stored_trimmed(store, admin) -> None:
    ElectionService(store).create(
        admin,
        _payload(title="  Student Council 2024  ", type="department", department=" CS "),
    )

    row = store.rows("elections")[0]
    assert row["title"] == "Student Council 2024"
    assert row["department"] == "CS"


def test_update_revalidates_merged_window(store, admin, election) -> None:
    service = ElectionService(store)
    with pytest.raises(InvalidInputError):
        service.update(
            admin,
            election["id"],
            ElectionUpdate(end_date=datetime(2023, 12, 31, tzinfo=UTC)),
        )

    updated = service.update(admin, election["id"], ElectionUpdate(title="Student Council 2025"))
    assert updated["title"] == "Student Council 2025"
    assert updated["start_date"] == election["start_date"]


def test_list_elections_filters_by_derived_phase(store, admin, election) -> None:
    now = datetime.now(tz=UTC)
    store.seed(
        "elections",
        title="Running now",
        description="Currently open election",
        start_date=(now - timedelta(days=1)).isoformat(),
        end_date=(now + timedelta(days=1)).isoformat(),
        type="campus-wide",
        created_by=admin.id,
    )
    service = ElectionService(store)

    active = service.list_elections(phase=ElectionPhase.ACTIVE, now=now)
    completed = service.list_elections(phase=ElectionPhase.COMPLETED, now=now)

    assert [row["title"] for row in active] == ["Running now"]
    assert [row["id"] for row in completed] == [election["id"]]
    assert [row["title"] for row in service.list_elections(now=now)][0] == "Running now"


def test_delete_election_cascades_candidates_and_votes(store, admin, student, election, candidates):
    VoteService(store).cast_vote(
        student, election["id"], candidates[0]["id"], now=datetime(2024, 1, 3, tzinfo=UTC)
    )

    result = ElectionService(store).delete(admin, election["id"])

    assert result == {"candidates_deleted": 2, "votes_deleted": 1}
    assert CandidateService(store).list_candidates(election["id"]) == []
    assert VoteService(store).list_votes(election_id=election["id"]) == []
    with pytest.raises(NotFoundError):
        ElectionService(store).get_election(election["id"])


def test_delete_election_leaves_store_intact_when_store_fails(
    store, admin, student, election, candidates
):
    VoteService(store).cast_vote(
        student, election["id"], candidates[0]["id"], now=datetime(2024, 1, 3, tzinfo=UTC)
    )
    store.unavailable.add("candidates")

    with pytest.raises(StoreUnavailableError):
        ElectionService(store).delete(admin, election["id"])

    assert len(store.rows("votes")) == 1
    assert len(store.rows("candidates")) == 2
    assert len(store.rows("elections")) == 1


@pytest.mark.parametrize(
    "overrides",
    [{"name": "    "}, {"department": "  "}, {"manifesto": "           "}],
)
def test_whitespace_only_candidate_text_is_rejected(overrides: dict) -> None:
    values = {
        "name": "Carlos Reyes",
        "department": "Computer Science",
        "manifesto": "A better campus for everyone",
        "election_id": "e1",
    }
    with pytest.raises(ValueError):
        CandidateCreate(**{**values, **overrides})
    with pytest.raises(ValueError):
        CandidateUpdate(**overrides)


def test_candidate_requires_existing_election(store, admin) -> None:
    payload = CandidateCreate(
        name="Carlos Reyes",
        department="Computer Science",
        manifesto="A better campus for everyone",
        election_id="missing",
    )
    with pytest.raises(NotFoundError, match="Election"):
        CandidateService(store).create(admin, payload)


def test_candidate_update_keeps_election(store, admin, candidates) -> None:
    service = CandidateService(store)
    updated = service.update(admin, candidates[0]["id"], CandidateUpdate(name="Carlos R. Reyes"))

    assert updated["name"] == "Carlos R. Reyes"
    assert updated["election_id"] == candidates[0]["election_id"]
    assert "election_id" not in CandidateUpdate.model_fields


def test_candidate_with_votes_cannot_be_deleted(store, admin, student, election, candidates):
    service = CandidateService(store)
    VoteService(store).cast_vote(
        student, election["id"], candidates[0]["id"], now=datetime(2024, 1, 3, tzinfo=UTC)
    )

    with pytest.raises(ConflictError) as excinfo:
        service.delete(admin, candidates[0]["id"])
    assert excinfo.value.code == "CANDIDATE_HAS_VOTES"

    service.delete(admin, candidates[1]["id"])
    assert [row["id"] for row in service.list_candidates(election["id"])] == [candidates[0]["id"]]
