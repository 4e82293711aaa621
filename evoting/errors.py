# evoting/errors.py

# Error taxonomy shared by the registry, the ledger and the HTTP layer.


class VotingError(Exception):
    """Base class for failures surfaced to the caller verbatim."""

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'success': False, 'error': type(self).__name__, 'message': self.message}


class ValidationError(VotingError):
    status_code = 400


class DuplicateVote(VotingError):
    status_code = 409

    def __init__(self, message="You have already voted in this election"):
        super().__init__(message)


class InvalidCandidate(VotingError):
    status_code = 422

    def __init__(self, election_id, candidate_id, valid_candidates=None):
        self.election_id = election_id
        self.candidate_id = candidate_id
        self.valid_candidates = list(valid_candidates or [])
        if self.valid_candidates:
            options = ', '.join(f"{c['candidate_id']} ({c['name']})" for c in self.valid_candidates)
            message = (f"Invalid candidate {candidate_id} for election {election_id}. "
                       f"Valid candidates: {options}")
        else:
            message = f"Invalid candidate {candidate_id}: election {election_id} has no candidates"
        super().__init__(message)

    def to_dict(self):
        data = super().to_dict()
        data['valid_candidates'] = self.valid_candidates
        return data


class StorageError(VotingError):
    status_code = 503

    def __init__(self, message="A database error occurred, please try again.", retryable=False):
        super().__init__(message)
        self.retryable = retryable

    def to_dict(self):
        data = super().to_dict()
        data['retryable'] = self.retryable
        return data
