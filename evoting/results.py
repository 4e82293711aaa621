# evoting/results.py

from collections import namedtuple

# Outcome of a successful write; failures are raised as VotingError subclasses
OperationResult = namedtuple('OperationResult', ['success', 'message', 'id'])


def ok(message, id=None):
    return OperationResult(True, message, id)
