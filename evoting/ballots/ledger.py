# evoting/ballots/ledger.py

"""Vote ledger: one vote per (election, voter identity), and the tallies built on it.

``cast_vote`` runs the duplicate check, voter provisioning and the vote insert in
a single transaction. The ``uq_online_votes_election_cnic`` constraint decides
concurrent casts for the same identity: the first commit wins and the other
caller receives ``DuplicateVote``.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from evoting.database.models import Candidate, Election, Vote, Voter
from evoting.database.storage import storage_guard
from evoting.elections.status import ElectionStatus, derive_status, utcnow
from evoting.errors import DuplicateVote, InvalidCandidate, StorageError, ValidationError
from evoting.results import ok
from evoting.security.input_validator import InputValidator

logger = logging.getLogger(__name__)
validator = InputValidator()

NO_VOTES_WINNER = "No votes cast"
ONLINE_LOCATION = "Online Platform"


def placeholder_voter(cnic):
    """Minimal voter row satisfying the online_votes -> voters foreign key."""
    return Voter(
        cnic=cnic,
        name='Online Voter',
        age=25,
        city='Unknown',
        province='Unknown',
        gender='M',
        email=f'voter{cnic}@temp.com',
        phone=f'+{cnic}',
        status='Active',
    )


def cast_vote(election_id, candidate_id, voter_identity, now=None):
    cnic = validator.validate_cnic(voter_identity)
    candidate_id = validator.parse_int(candidate_id, 'Candidate')
    now = now or utcnow()

    try:
        with storage_guard('cast_vote', raise_integrity=True) as session:
            election = session.get(Election, election_id)
            if election is None:
                raise ValidationError(f"Election {election_id} not found")
            if derive_status(now, election.voting_start, election.voting_end) is not ElectionStatus.ACTIVE:
                raise ValidationError("Voting is not open for this election")

            if _existing_vote(session, election_id, cnic) is not None:
                raise DuplicateVote()

            candidate = (session.query(Candidate)
                         .filter(Candidate.id == candidate_id, Candidate.election_id == election_id)
                         .first())
            if candidate is None:
                valid = (session.query(Candidate.id, Candidate.name)
                         .filter(Candidate.election_id == election_id)
                         .order_by(Candidate.name)
                         .all())
                raise InvalidCandidate(election_id, candidate_id,
                                       [{'candidate_id': c.id, 'name': c.name} for c in valid])

            if session.get(Voter, cnic) is None:
                session.add(placeholder_voter(cnic))
                logger.info("Provisioned placeholder voter record for a first-time voter")

            session.add(Vote(
                cnic=cnic,
                candidate_id=candidate.id,
                election_id=election_id,
                constituency=candidate.constituency,
                timestamp=now,
                location=ONLINE_LOCATION,
            ))
            session.commit()
    except IntegrityError as e:
        # Lost a race against a concurrent cast, or the placeholder clashed with another row
        if has_voted(election_id, cnic):
            raise DuplicateVote() from e
        logger.error("Vote insert for election %s violated a constraint: %s", election_id, e)
        raise StorageError("Failed to cast vote") from e

    logger.info("Vote recorded in election %s for candidate %s", election_id, candidate_id)
    return ok("Vote cast successfully")


def _existing_vote(session, election_id, cnic):
    return session.query(Vote.id).filter(Vote.election_id == election_id, Vote.cnic == cnic).first()


def has_voted(election_id, cnic):
    with storage_guard('has_voted') as session:
        return _existing_vote(session, election_id, cnic) is not None


def percentage(votes, total):
    """Share of ``total`` as a whole percent, rounding halves up; 0 when nothing was cast."""
    if total <= 0:
        return 0
    return (votes * 200 + total) // (total * 2)


def _ranked_rows(session, election_id):
    vote_count = func.count(Vote.id).label('votes')
    return (session.query(Candidate.id, Candidate.name, Candidate.party, Candidate.symbol,
                          Candidate.constituency, vote_count)
            .outerjoin(Vote, Vote.candidate_id == Candidate.id)
            .filter(Candidate.election_id == election_id)
            .group_by(Candidate.id, Candidate.name, Candidate.party, Candidate.symbol, Candidate.constituency)
            .order_by(vote_count.desc(), Candidate.name.asc(), Candidate.id.asc())
            .all())


def tally(rows):
    total = sum(row.votes for row in rows)
    results = [{
        'candidate_id': row.id,
        'name': row.name,
        'party': row.party,
        'symbol': row.symbol,
        'constituency': row.constituency,
        'votes': row.votes,
        'percentage': percentage(row.votes, total),
    } for row in rows]
    return results, total


def winner_of(results, total):
    if total == 0 or not results:
        return NO_VOTES_WINNER
    return results[0]['name']


def get_results(election_id):
    """Every candidate of the election with its vote count, highest first, ties by name."""
    try:
        with storage_guard('get_results') as session:
            results, _ = tally(_ranked_rows(session, election_id))
            return results
    except StorageError:
        logger.warning("Returning no results for election %s after storage failure", election_id)
        return []


def get_completed_results_summary(now=None):
    now = now or utcnow()
    summaries = []
    try:
        with storage_guard('get_completed_results_summary') as session:
            elections = (session.query(Election)
                         .filter(Election.voting_end < now)
                         .order_by(Election.voting_end.desc(), Election.id.desc())
                         .all())
            for election in elections:
                if derive_status(now, election.voting_start, election.voting_end) is not ElectionStatus.COMPLETED:
                    continue
                results, total = tally(_ranked_rows(session, election.id))
                summaries.append({
                    'election_id': election.id,
                    'name': election.name,
                    'description': f"{election.election_type} - {election.election_year}",
                    'voting_end': election.voting_end.isoformat(),
                    'total_votes': total,
                    'results': results,
                    'winner': winner_of(results, total),
                })
    except StorageError:
        logger.warning("Returning no completed results after storage failure")
        return []
    return summaries
