# evoting/elections/registry.py

"""Election and candidate registry.

Reads favour availability: a storage failure is logged and an empty result is
returned. Writes raise ``ValidationError`` before touching the database and
``StorageError`` when the insert itself fails.
"""

import logging

from evoting.database.models import Candidate, Election
from evoting.database.storage import storage_guard
from evoting.elections.status import derive_status, utcnow
from evoting.errors import StorageError, ValidationError
from evoting.results import ok
from evoting.security.input_validator import InputValidator

logger = logging.getLogger(__name__)
validator = InputValidator()


def serialize_election(election, now=None):
    status = derive_status(now or utcnow(), election.voting_start, election.voting_end)
    return {
        'election_id': election.id,
        'name': election.name,
        'election_type': election.election_type,
        'election_date': election.election_date.isoformat(),
        'election_year': election.election_year,
        'status': status.value,
        'voting_start': election.voting_start.isoformat(),
        'voting_end': election.voting_end.isoformat(),
    }


def list_elections(now=None):
    """All elections, newest voting window first, each with its derived status."""
    now = now or utcnow()
    try:
        with storage_guard('list_elections') as session:
            elections = (session.query(Election)
                         .order_by(Election.voting_start.desc(), Election.id.desc())
                         .all())
            return [serialize_election(e, now) for e in elections]
    except StorageError:
        logger.warning("Returning no elections after storage failure")
        return []


def get_election(election_id, now=None):
    try:
        with storage_guard('get_election') as session:
            election = session.get(Election, election_id)
            return serialize_election(election, now) if election else None
    except StorageError:
        logger.warning("Election %s unavailable after storage failure", election_id)
        return None


def list_candidates(election_id):
    try:
        with storage_guard('list_candidates') as session:
            candidates = (session.query(Candidate)
                          .filter(Candidate.election_id == election_id)
                          .order_by(Candidate.name, Candidate.id)
                          .all())
            return [c.to_dict() for c in candidates]
    except StorageError:
        logger.warning("Returning no candidates for election %s after storage failure", election_id)
        return []


def create_election(name, election_type, election_date, election_year, voting_start, voting_end, now=None):
    fields = validator.validate_election_form({
        'name': name,
        'election_type': election_type,
        'election_date': election_date,
        'election_year': election_year,
        'voting_start': voting_start,
        'voting_end': voting_end,
    })
    status = derive_status(now or utcnow(), fields['voting_start'], fields['voting_end'])

    with storage_guard('create_election') as session:
        election = Election(status=status.value, **fields)
        session.add(election)
        session.commit()
        logger.info("Created election %s (%s) with status %s", election.id, election.name, status.value)
        return ok("Election created successfully", election.id)


def add_candidate(election_id, name, party, symbol, constituency, province, age):
    fields = validator.validate_candidate_form({
        'name': name,
        'party': party,
        'symbol': symbol,
        'constituency': constituency,
        'province': province,
        'age': age,
    })

    with storage_guard('add_candidate') as session:
        if session.get(Election, election_id) is None:
            raise ValidationError(f"Election {election_id} not found")
        candidate = Candidate(election_id=election_id, **fields)
        session.add(candidate)
        session.commit()
        logger.info("Added candidate %s to election %s in %s", candidate.id, election_id, candidate.constituency)
        return ok("Candidate added successfully", candidate.id)


def refresh_election_statuses(now=None):
    """Rewrite the stored status column from each voting window; returns rows changed."""
    now = now or utcnow()
    changed = 0
    with storage_guard('refresh_election_statuses') as session:
        for election in session.query(Election).all():
            status = derive_status(now, election.voting_start, election.voting_end).value
            if election.status != status:
                election.status = status
                changed += 1
        session.commit()
    logger.info("Refreshed election statuses, %d changed", changed)
    return changed
