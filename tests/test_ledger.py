import pytest
from datetime import timedelta

from evoting import db
from evoting.ballots import ledger
from evoting.database.models import Vote, Voter
from evoting.errors import DuplicateVote, InvalidCandidate, StorageError, ValidationError

VOTER = "35202-1234567-1"


def cnic(n):
    return f"{3520200000000 + n}"


def test_cast_vote_records_vote_and_provisions_voter(app, now, make_election, make_candidate):
    election_id = make_election()
    candidate_id = make_candidate(election_id, "Ayesha Khan", constituency="PP-158")

    result = ledger.cast_vote(election_id, candidate_id, VOTER, now=now)
    assert result.success is True
    assert result.message == "Vote cast successfully"

    vote = Vote.query.one()
    assert vote.cnic == "3520212345671"
    assert vote.constituency == "PP-158"
    assert vote.location == "Online Platform"
    assert vote.timestamp == now

    voter = db.session.get(Voter, "3520212345671")
    assert voter.name == "Online Voter"
    assert voter.city == "Unknown"
    assert voter.email == "voter3520212345671@temp.com"
    assert voter.phone == "+3520212345671"


def test_existing_voter_is_reused(app, now, make_election, make_candidate):
    first = make_election("First")
    second = make_election("Second")
    ledger.cast_vote(first, make_candidate(first, "A"), VOTER, now=now)
    ledger.cast_vote(second, make_candidate(second, "B"), VOTER, now=now)

    assert Voter.query.count() == 1
    assert Vote.query.count() == 2


def test_second_vote_in_same_election_is_duplicate(app, now, make_election, make_candidate):
    election_id = make_election()
    a = make_candidate(election_id, "A")
    b = make_candidate(election_id, "B")
    ledger.cast_vote(election_id, a, VOTER, now=now)

    for candidate_id in (a, b, 9999):
        with pytest.raises(DuplicateVote, match="already voted"):
            ledger.cast_vote(election_id, candidate_id, VOTER, now=now)
    assert Vote.query.count() == 1


def test_concurrent_duplicate_is_rejected_by_unique_constraint(app, now, make_election, make_candidate, monkeypatch):
    election_id = make_election()
    candidate_id = make_candidate(election_id, "A")
    ledger.cast_vote(election_id, candidate_id, VOTER, now=now)

    # Simulate a second request that passed its duplicate check before the first insert landed
    monkeypatch.setattr(ledger, "_existing_vote", lambda session, election_id, cnic: None)
    monkeypatch.setattr(ledger, "has_voted", lambda election_id, cnic: True)
    with pytest.raises(DuplicateVote):
        ledger.cast_vote(election_id, candidate_id, VOTER, now=now)
    assert Vote.query.count() == 1


def test_candidate_from_other_election_is_invalid(app, now, make_election, make_candidate):
    election_id = make_election("Mine")
    other_id = make_election("Other")
    mine = make_candidate(election_id, "Bilal Shah")
    foreign = make_candidate(other_id, "Zain Ali")

    with pytest.raises(InvalidCandidate) as excinfo:
        ledger.cast_vote(election_id, foreign, VOTER, now=now)
    assert excinfo.value.valid_candidates == [{"candidate_id": mine, "name": "Bilal Shah"}]
    assert "Bilal Shah" in excinfo.value.message
    assert Vote.query.count() == 0
    assert Voter.query.count() == 0


def test_election_without_candidates(app, now, make_election):
    election_id = make_election()
    with pytest.raises(InvalidCandidate, match="has no candidates"):
        ledger.cast_vote(election_id, 1, VOTER, now=now)


def test_votes_only_accepted_while_active(app, now, make_election, make_candidate):
    election_id = make_election(start_offset=1, end_offset=2)
    candidate_id = make_candidate(election_id, "A")
    with pytest.raises(ValidationError, match="Voting is not open"):
        ledger.cast_vote(election_id, candidate_id, VOTER, now=now)
    with pytest.raises(ValidationError, match="Voting is not open"):
        ledger.cast_vote(election_id, candidate_id, VOTER, now=now + timedelta(days=3))


def test_malformed_identity_is_rejected(app, now, make_election, make_candidate):
    election_id = make_election()
    candidate_id = make_candidate(election_id, "A")
    with pytest.raises(ValidationError, match="13-digit CNIC"):
        ledger.cast_vote(election_id, candidate_id, "12345", now=now)


def test_results_ranked_with_percentages(app, now, make_election, make_candidate):
    election_id = make_election()
    a = make_candidate(election_id, "A", party="PML-N")
    b = make_candidate(election_id, "B", party="PPP")
    for n in range(3):
        ledger.cast_vote(election_id, a, cnic(n), now=now)
    ledger.cast_vote(election_id, b, cnic(10), now=now)

    results = ledger.get_results(election_id)
    assert [(r["candidate_id"], r["name"], r["party"], r["votes"], r["percentage"]) for r in results] == [
        (a, "A", "PML-N", 3, 75),
        (b, "B", "PPP", 1, 25),
    ]
    assert ledger.winner_of(results, 4) == "A"


def test_results_include_zero_vote_candidates_and_break_ties_by_name(app, now, make_election, make_candidate):
    election_id = make_election()
    zed = make_candidate(election_id, "Zed")
    amy = make_candidate(election_id, "Amy")
    make_candidate(election_id, "Nobody")
    ledger.cast_vote(election_id, zed, cnic(1), now=now)
    ledger.cast_vote(election_id, amy, cnic(2), now=now)

    results = ledger.get_results(election_id)
    assert [(r["name"], r["votes"]) for r in results] == [("Amy", 1), ("Zed", 1), ("Nobody", 0)]
    assert [r["percentage"] for r in results] == [50, 50, 0]


def test_percentages_sum_to_about_100(app, now, make_election, make_candidate):
    election_id = make_election()
    ids = [make_candidate(election_id, name) for name in ("A", "B", "C")]
    n = 0
    for candidate_id, count in zip(ids, (1, 1, 1)):
        for _ in range(count):
            ledger.cast_vote(election_id, candidate_id, cnic(n), now=now)
            n += 1
    total = sum(r["percentage"] for r in ledger.get_results(election_id))
    assert abs(total - 100) <= len(ids)


def test_no_votes_means_zero_percent_and_sentinel_winner(app, make_election, make_candidate):
    election_id = make_election()
    make_candidate(election_id, "A")
    make_candidate(election_id, "B")
    results = ledger.get_results(election_id)
    assert [r["percentage"] for r in results] == [0, 0]
    assert ledger.winner_of(results, 0) == "No votes cast"


@pytest.mark.parametrize("votes, total, expected", [
    (0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 200, 1), (1, 201, 0), (5, 5, 100),
])
def test_percentage_rounds_half_up(votes, total, expected):
    assert ledger.percentage(votes, total) == expected


def test_completed_results_summary(app, now, make_election, make_candidate):
    done = make_election("Finished", start_offset=-3, end_offset=-2)
    running = make_election("Running")
    a = make_candidate(done, "A")
    b = make_candidate(done, "B")
    make_candidate(running, "C")
    voting_time = now - timedelta(days=2, hours=12)
    ledger.cast_vote(done, a, cnic(1), now=voting_time)
    ledger.cast_vote(done, a, cnic(2), now=voting_time)
    ledger.cast_vote(done, b, cnic(3), now=voting_time)

    summary = ledger.get_completed_results_summary(now=now)
    assert len(summary) == 1
    entry = summary[0]
    assert entry["election_id"] == done
    assert entry["total_votes"] == 3
    assert entry["winner"] == "A"
    assert entry["description"] == "National Assembly - 2024"
    assert [(r["name"], r["votes"], r["percentage"]) for r in entry["results"]] == [("A", 2, 67), ("B", 1, 33)]


def test_completed_election_without_votes(app, now, make_election, make_candidate):
    done = make_election("Quiet", start_offset=-3, end_offset=-2)
    make_candidate(done, "A")
    [entry] = ledger.get_completed_results_summary(now=now)
    assert entry["total_votes"] == 0
    assert entry["winner"] == "No votes cast"


def test_results_degrade_to_empty_when_storage_fails(app, now, make_election):
    election_id = make_election()
    db.drop_all()
    assert ledger.get_results(election_id) == []
    assert ledger.get_completed_results_summary(now=now) == []


def test_cast_vote_raises_when_storage_fails(app, now, make_election, make_candidate):
    election_id = make_election()
    candidate_id = make_candidate(election_id, "A")
    db.drop_all()
    with pytest.raises(StorageError):
        ledger.cast_vote(election_id, candidate_id, VOTER, now=now)
