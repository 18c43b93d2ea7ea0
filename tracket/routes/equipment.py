from flask import Blueprint, jsonify, request

from tracket.app import db
from tracket.models import Activity, Racket
from tracket.services.equipment import (
    normalize_racket_payload, parse_bool, usage_minutes_by_racket,
)

equipment_bp = Blueprint('equipment', __name__)


@equipment_bp.route('/rackets', methods=['GET'])
def get_rackets():
    query = Racket.query
    raw_broken = request.args.get('broken')
    if raw_broken is not None:
        broken = parse_bool(raw_broken)
        if broken is None:
            return jsonify({'error': 'broken must be true or false'}), 400
        query = query.filter_by(is_broken=broken)
    rackets = query.order_by(Racket.created_at.asc(), Racket.id.asc()).all()
    return jsonify([racket.to_dict() for racket in rackets])


@equipment_bp.route('/rackets/usage', methods=['GET'])
def get_racket_usage():
    usage = usage_minutes_by_racket(Racket.query.all(), Activity.query.all())
    return jsonify({str(racket_id): minutes for racket_id, minutes in usage.items()})


@equipment_bp.route('/rackets/<int:racket_id>', methods=['GET'])
def get_racket(racket_id):
    racket = db.session.get(Racket, racket_id)
    if not racket:
        return jsonify({'error': 'Racket not found'}), 404
    return jsonify(racket.to_dict())


@equipment_bp.route('/rackets', methods=['POST'])
def create_racket():
    racket_data, errors = normalize_racket_payload(request.get_json(silent=True), partial=False)
    if errors:
        return jsonify({'error': errors[0], 'errors': errors}), 400

    racket = Racket(**racket_data)
    db.session.add(racket)
    db.session.commit()
    return jsonify(racket.to_dict()), 201


@equipment_bp.route('/rackets/<int:racket_id>', methods=['PATCH'])
def update_racket(racket_id):
    racket_data, errors = normalize_racket_payload(request.get_json(silent=True), partial=True)
    if errors:
        return jsonify({'error': errors[0], 'errors': errors}), 400

    racket = db.session.get(Racket, racket_id)
    if not racket:
        return jsonify({'error': 'Racket not found'}), 404

    for attr, value in racket_data.items():
        setattr(racket, attr, value)
    db.session.commit()
    return jsonify(racket.to_dict())
