# evoting/routes.py

# JSON routes for the election registry and the vote ledger.
# Pages and forms live in the front end; every handler here returns JSON.

from flask import Blueprint, current_app, jsonify, request

from evoting import limiter
from evoting.ballots import ledger
from evoting.elections import registry
from evoting.elections.status import ElectionStatus
from evoting.errors import DuplicateVote, InvalidCandidate, ValidationError, VotingError
from evoting.operations.health_monitor import check_db, check_health
from evoting.reference import constituencies

api = Blueprint('api', __name__)


def audit_logger():
    return current_app.extensions['evoting.audit']


def vote_rate_limit():
    return current_app.config['VOTE_RATE_LIMIT']


def form_data():
    """Accept either a JSON body or a submitted form."""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Request body must be an object")
    return data


@api.errorhandler(VotingError)
def handle_voting_error(error):
    return jsonify(error.to_dict()), error.status_code


@api.route('/api/elections', methods=['GET'])
def list_elections():
    return jsonify(registry.list_elections())


@api.route('/api/elections', methods=['POST'])
def create_election():
    data = form_data()
    result = registry.create_election(
        data.get('name'),
        data.get('election_type'),
        data.get('election_date'),
        data.get('election_year'),
        data.get('voting_start'),
        data.get('voting_end'),
    )
    audit_logger().log_event('election_created', {'election_id': result.id}, election_id=result.id)
    return jsonify({'success': True, 'message': result.message, 'election_id': result.id}), 201


@api.route('/api/elections/<int:election_id>', methods=['GET'])
def get_election(election_id):
    election = registry.get_election(election_id)
    if election is None:
        return jsonify({'success': False, 'message': 'Election not found'}), 404
    return jsonify(election)


@api.route('/api/elections/<int:election_id>/candidates', methods=['GET'])
def list_candidates(election_id):
    return jsonify(registry.list_candidates(election_id))


@api.route('/api/elections/<int:election_id>/candidates', methods=['POST'])
def add_candidate(election_id):
    data = form_data()
    result = registry.add_candidate(
        election_id,
        data.get('name'),
        data.get('party'),
        data.get('symbol'),
        data.get('constituency'),
        data.get('province'),
        data.get('age'),
    )
    audit_logger().log_event('candidate_added', {'candidate_id': result.id}, election_id=election_id)
    return jsonify({'success': True, 'message': result.message, 'candidate_id': result.id}), 201


@api.route('/api/elections/<int:election_id>/votes', methods=['POST'])
@limiter.limit(vote_rate_limit)
def cast_vote(election_id):
    data = form_data()
    try:
        result = ledger.cast_vote(election_id, data.get('candidate_id'), data.get('cnic'))
    except DuplicateVote:
        audit_logger().log_event('duplicate_vote_attempt', {'ip': request.remote_addr}, election_id=election_id)
        raise
    except InvalidCandidate as e:
        audit_logger().log_event('invalid_candidate', {'candidate_id': e.candidate_id}, election_id=election_id)
        raise
    audit_logger().log_event('vote_cast', {'candidate_id': int(data['candidate_id'])}, election_id=election_id)
    return jsonify({'success': True, 'message': result.message}), 201


@api.route('/api/elections/<int:election_id>/results', methods=['GET'])
def election_results(election_id):
    election = registry.get_election(election_id)
    if election is None:
        return jsonify({'success': False, 'message': 'Election not found'}), 404
    if election['status'] != ElectionStatus.COMPLETED.value:
        return jsonify({'success': False,
                        'message': 'Results are only available for completed elections'}), 409
    results = ledger.get_results(election_id)
    total = sum(r['votes'] for r in results)
    return jsonify({
        'election': election,
        'total_votes': total,
        'results': results,
        'winner': ledger.winner_of(results, total),
    })


@api.route('/api/results', methods=['GET'])
def completed_results():
    return jsonify(ledger.get_completed_results_summary())


@api.route('/api/elections/refresh-status', methods=['POST'])
def refresh_statuses():
    changed = registry.refresh_election_statuses()
    return jsonify({'success': True, 'message': 'Election statuses updated', 'changed': changed})


@api.route('/api/constituencies', methods=['GET'])
def constituency_suggestions():
    prefix = request.args.get('q', '')
    try:
        limit = int(request.args.get('limit', 10))
    except ValueError:
        raise ValidationError("limit must be a whole number")
    return jsonify([c._asdict() for c in constituencies.suggestions(prefix, limit)])


@api.route('/health', methods=['GET'])
def liveness():
    res = check_health()
    code = 200 if res["overall_ok"] else 503
    return jsonify(res), code


@api.route('/ready', methods=['GET'])
def readiness():
    db = check_db()
    return jsonify({"db": db, "overall_ok": db["ok"]}), 200 if db["ok"] else 503
