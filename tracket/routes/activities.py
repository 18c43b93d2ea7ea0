from flask import Blueprint, current_app, jsonify, request

from tracket.app import db, socketio
from tracket.models import Activity
from tracket.services.activity_payloads import (
    apply_activity_changes, normalize_activity_payload,
)
from tracket.services.activity_stats import (
    list_activities, list_activities_by_date_range, list_activities_by_sport,
    stats_overview, weekly_stats,
)
from tracket.services.csv_import import import_activity_rows

activities_bp = Blueprint('activities', __name__)


def _broadcast_activity_change(action, activity_id=None):
    socketio.emit('activity_changed', {'action': action, 'id': activity_id})


def _validation_error(errors):
    return jsonify({'error': 'Invalid activity data', 'errors': errors}), 400


@activities_bp.route('', methods=['GET'])
def get_activities():
    sport = (request.args.get('sport') or '').strip()
    start_date = (request.args.get('startDate') or '').strip()
    end_date = (request.args.get('endDate') or '').strip()

    if sport:
        activities = list_activities_by_sport(sport)
    elif start_date and end_date:
        activities = list_activities_by_date_range(start_date, end_date)
    else:
        activities = list_activities()
    return jsonify([activity.to_dict() for activity in activities])


@activities_bp.route('/<int:activity_id>', methods=['GET'])
def get_activity(activity_id):
    activity = db.session.get(Activity, activity_id)
    if not activity:
        return jsonify({'error': 'Activity not found'}), 404
    return jsonify(activity.to_dict())


@activities_bp.route('', methods=['POST'])
def create_activity():
    data = request.get_json(silent=True)
    activity_data, errors = normalize_activity_payload(data, partial=False)
    if errors:
        return _validation_error(errors)

    activity = Activity(**activity_data)
    db.session.add(activity)
    db.session.commit()
    _broadcast_activity_change('added', activity.id)
    return jsonify(activity.to_dict()), 201


@activities_bp.route('/<int:activity_id>', methods=['PATCH'])
def update_activity(activity_id):
    data = request.get_json(silent=True)
    activity_data, errors = normalize_activity_payload(data, partial=True)
    if errors:
        return _validation_error(errors)

    activity = db.session.get(Activity, activity_id)
    if not activity:
        return jsonify({'error': 'Activity not found'}), 404

    apply_activity_changes(activity, activity_data)
    db.session.commit()
    _broadcast_activity_change('updated', activity.id)
    return jsonify(activity.to_dict())


@activities_bp.route('/<int:activity_id>', methods=['DELETE'])
def delete_activity(activity_id):
    activity = db.session.get(Activity, activity_id)
    if not activity:
        return jsonify({'error': 'Activity not found'}), 404

    db.session.delete(activity)
    db.session.commit()
    _broadcast_activity_change('deleted', activity_id)
    return '', 204


@activities_bp.route('/stats/overview', methods=['GET'])
def get_stats_overview():
    return jsonify(stats_overview(list_activities()))


@activities_bp.route('/stats/weekly', methods=['GET'])
def get_weekly_stats():
    default_weeks = current_app.config.get('WEEKLY_STATS_DEFAULT_WEEKS', 12)
    max_weeks = current_app.config.get('WEEKLY_STATS_MAX_WEEKS', 52)
    weeks = request.args.get('weeks', default_weeks, type=int)
    if weeks < 1:
        weeks = 1
    if weeks > max_weeks:
        weeks = max_weeks
    return jsonify({'weeks': weekly_stats(list_activities(), weeks=weeks)})


@activities_bp.route('/import-csv', methods=['POST'])
def import_csv():
    data = request.get_json(silent=True) or {}
    rows = data.get('csvData') if isinstance(data, dict) else None
    if not isinstance(rows, list):
        return jsonify({'error': 'Invalid CSV data format'}), 400

    result = import_activity_rows(rows, commit=True)
    current_app.logger.info(
        'CSV import finished: %d of %d rows imported', result['imported'], result['total']
    )
    if result['imported']:
        _broadcast_activity_change('imported')
    return jsonify(result)
