from flask import Blueprint, jsonify, request, current_app
from namegame import db, socketio, override_store
from namegame.auth import lecturer_required
from namegame.models import GameSession
from namegame.services.scoring import compute_all_results
from namegame.services.scoring.snapshot import snapshot_groups, snapshot_submissions
from namegame.services.verification import get_classifier
import time


results = Blueprint('results', __name__)


def _calculate_results():
    groups = snapshot_groups()
    submissions = snapshot_submissions()
    started = time.time()
    aggregate = compute_all_results(groups, submissions, override_store, get_classifier())
    current_app.logger.info(
        f"[results] groups={len(groups)} elapsed={time.time() - started:.1f}s"
    )
    return aggregate.to_dict()


@results.route('/results', methods=['GET'])
def get_results():
    return jsonify(_calculate_results())


@results.route('/sessions/complete-all', methods=['POST'])
@lecturer_required
def complete_all_sessions():
    open_sessions = GameSession.query.filter_by(completed=False).all()
    for session in open_sessions:
        session.completed = True
        db.session.add(session)
    db.session.commit()

    payload = _calculate_results()
    socketio.emit('all_results_ready', payload, namespace='/ws')
    return jsonify(payload)


@results.route('/verify-name-manual', methods=['POST'])
@lecturer_required
def verify_name_manual():
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        return jsonify({'error': 'Name is required'}), 400
    is_valid = data.get('is_valid')
    if not isinstance(is_valid, bool):
        return jsonify({'error': 'is_valid must be true or false'}), 400

    override = override_store.set(name, is_valid)
    current_app.logger.info(f"[override] name={name!r} valid={override.verdict}")
    socketio.emit('manual_verification_updated', {'name': name, 'verification': override.to_dict()}, namespace='/ws')
    return jsonify({'success': True, 'verification': override.to_dict()})


@results.route('/verify-name-manual/reset', methods=['POST'])
@lecturer_required
def reset_manual_verification():
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        return jsonify({'error': 'Name is required'}), 400

    override_store.clear(name)
    current_app.logger.info(f"[override] cleared name={name!r}")
    socketio.emit('manual_verification_updated', {'name': name, 'verification': None}, namespace='/ws')
    return jsonify({'success': True})


@results.route('/test-names', methods=['POST'])
def test_names():
    data = request.get_json(silent=True) or {}
    names = data.get('names')
    if not isinstance(names, list):
        return jsonify({'error': 'Invalid input'}), 400

    classifier = get_classifier()
    checked = []
    for item in names:
        if not isinstance(item, dict):
            return jsonify({'error': 'Invalid input'}), 400
        name = str(item.get('name') or '')
        pair = str(item.get('pair') or '')
        current_app.logger.info(f"[test-names] name={name!r} pair={pair}")
        checked.append({
            'name': name,
            'pair': pair,
            'result': classifier.classify(name, pair).to_dict(),
        })
    return jsonify(checked)
