"""Tests for CSV parsing and activity import."""
import json
import logging

import pytest
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError

from tracket.app import db
from tracket.import_activities import main as import_main
from tracket.models import Activity
from tracket.services.activity_seeder import seed_activities
from tracket.services.csv_import import (
    CSV_HEADERS, csv_row_to_activity, import_activity_rows, import_csv_file, parse_csv_text,
)

CSV_TEXT = (
    'date,sport,activity type,duration minutes,club name,club location,club map link,'
    'club latitude,club longitude,session rating,racket,partner,oponents,notes\n'
    '2025-08-03,padel,friendly,90,Padel Town,"Mag warehouses, Plot 911 - Dubai",'
    'https://maps.app.goo.gl/x,25.14082667,55.25946167,4,Wilson Bela Elite V2.5,Alvaro,'
    '"Ricardo, Tomas",\n'
    '2022-05-20,Tennis,,43,,,,,,,Babolat Pure Strike\n'
)


def test_header_keeps_oponents_spelling():
    assert 'oponents' in CSV_HEADERS
    assert 'opponents' not in CSV_HEADERS


def test_parse_csv_text_handles_quotes_and_short_rows():
    rows = parse_csv_text(CSV_TEXT)
    assert len(rows) == 2
    assert rows[0]['club location'] == 'Mag warehouses, Plot 911 - Dubai'
    assert rows[0]['oponents'] == 'Ricardo, Tomas'
    assert rows[1]['notes'] == ''
    assert rows[1]['partner'] == ''


def test_parse_csv_text_empty():
    assert parse_csv_text('') == []


def test_csv_row_to_activity():
    rows = parse_csv_text(CSV_TEXT)
    first = csv_row_to_activity(rows[0])
    assert first['sport'] == 'padel'
    assert first['duration'] == 90
    assert first['sessionRating'] == 4
    assert first['opponents'] == 'Ricardo, Tomas'
    assert first['clubLatitude'] == '25.14082667'
    assert first['notes'] is None

    second = csv_row_to_activity(rows[1])
    assert second['sport'] == 'tennis'
    assert second['activityType'] is None
    assert second['clubName'] is None
    assert second['sessionRating'] is None


def test_csv_row_without_oponents_yields_null_opponents():
    activity = csv_row_to_activity({'date': '2024-01-01', 'sport': 'padel', 'duration minutes': '60'})
    assert activity['opponents'] is None


def test_import_csv_route(client):
    rows = parse_csv_text(CSV_TEXT)
    res = client.post('/api/activities/import-csv', json={'csvData': rows})
    assert res.status_code == 200
    data = json.loads(res.data)
    assert data == {'message': 'Imported 2 activities', 'imported': 2, 'total': 2}

    activities = json.loads(client.get('/api/activities').data)
    assert activities[0]['opponents'] == 'Ricardo, Tomas'
    assert activities[1]['sport'] == 'tennis'


def test_import_csv_skips_bad_rows(client, caplog):
    rows = [
        {'date': '2024-01-01', 'sport': 'padel', 'duration': 60},
        {'date': '2024-01-02', 'sport': 'padel', 'duration minutes': 'abc'},
        'garbage',
        {'date': 'not-a-date', 'sport': 'tennis', 'duration': 30},
    ]
    with caplog.at_level(logging.WARNING):
        res = client.post('/api/activities/import-csv', json={'csvData': rows})
    data = json.loads(res.data)
    assert res.status_code == 200
    assert data['imported'] == 1
    assert data['total'] == 4
    assert 'Failed to import activity row 2' in caplog.text


def test_import_csv_requires_list(client):
    res = client.post('/api/activities/import-csv', json={'csvData': 'nope'})
    assert res.status_code == 400
    assert json.loads(res.data)['error'] == 'Invalid CSV data format'


def test_import_rows_without_commit(app):
    result = import_activity_rows([{'date': '2024-01-01', 'sport': 'padel', 'duration': 30}],
                                  commit=False)
    assert result['imported'] == 1
    assert Activity.query.count() == 1


def test_seed_activities_only_when_empty(app, tmp_path):
    csv_file = tmp_path / 'seed.csv'
    csv_file.write_text(CSV_TEXT, encoding='utf-8')

    assert seed_activities(csv_path=str(csv_file)) == 2
    assert seed_activities(csv_path=str(csv_file)) == 0
    assert Activity.query.count() == 2


def test_seed_activities_missing_file(app, tmp_path):
    assert seed_activities(csv_path=str(tmp_path / 'missing.csv')) == 0


def test_import_cli_dry_run(tmp_path, capsys):
    csv_file = tmp_path / 'activities.csv'
    csv_file.write_text(CSV_TEXT, encoding='utf-8')

    assert import_main(['--file', str(csv_file), '--env', 'testing', '--dry-run']) == 0
    output = json.loads(capsys.readouterr().out)
    assert output['imported'] == 2
    assert output['dry_run'] is True


def test_row_refused_by_database_is_skipped(client, caplog):
    def _refuse_45_minute_rows(mapper, connection, target):
        if target.duration == 45:
            raise SQLAlchemyError('row refused')

    rows = [
        {'date': '2024-01-01', 'sport': 'padel', 'duration': 60},
        {'date': '2024-01-02', 'sport': 'padel', 'duration': 45},
        {'date': '2024-01-03', 'sport': 'padel', 'duration': 30},
    ]
    event.listen(Activity, 'before_insert', _refuse_45_minute_rows)
    try:
        with caplog.at_level(logging.WARNING):
            res = client.post('/api/activities/import-csv', json={'csvData': rows})
    finally:
        event.remove(Activity, 'before_insert', _refuse_45_minute_rows)

    assert res.status_code == 200
    data = json.loads(res.data)
    assert data == {'message': 'Imported 2 activities', 'imported': 2, 'total': 3}
    assert 'Failed to import activity row 2: row refused' in caplog.text

    durations = sorted(a['duration'] for a in json.loads(client.get('/api/activities').data))
    assert durations == [30, 60]


def test_oversized_duration_row_is_skipped(client):
    rows = [
        {'date': '2024-01-01', 'sport': 'padel', 'duration': 60},
        {'date': '2024-01-02', 'sport': 'padel', 'duration': 10**20},
        {'date': '2024-01-03', 'sport': 'padel', 'duration': 30},
    ]
    res = client.post('/api/activities/import-csv', json={'csvData': rows})
    assert res.status_code == 200
    assert json.loads(res.data)['imported'] == 2
    assert len(json.loads(client.get('/api/activities').data)) == 2


def test_csv_numbers_keep_leading_integer():
    activity = csv_row_to_activity({
        'date': '2024-01-01', 'sport': 'padel',
        'duration minutes': '90.5', 'session rating': '4.5',
    })
    assert activity['duration'] == 90
    assert activity['sessionRating'] == 4

    activity = csv_row_to_activity({
        'date': '2024-01-01', 'sport': 'padel',
        'duration minutes': ' 75min', 'session rating': 'great',
    })
    assert activity['duration'] == 75
    assert activity['sessionRating'] is None


def test_dry_run_leaves_store_empty(app, tmp_path):
    csv_file = tmp_path / 'activities.csv'
    csv_file.write_text(CSV_TEXT, encoding='utf-8')

    result = import_csv_file(str(csv_file), commit=False)
    assert result['imported'] == 2
    db.session.rollback()
    assert Activity.query.count() == 0


def test_import_cli_help_mentions_database_url(capsys):
    with pytest.raises(SystemExit):
        import_main(['--help'])
    assert 'DATABASE_URL' in capsys.readouterr().out


def test_import_cli_warns_when_store_is_in_memory(tmp_path, capsys, caplog):
    csv_file = tmp_path / 'activities.csv'
    csv_file.write_text(CSV_TEXT, encoding='utf-8')

    with caplog.at_level(logging.WARNING):
        assert import_main(['--file', str(csv_file), '--env', 'testing']) == 0
    assert json.loads(capsys.readouterr().out)['imported'] == 2
    assert 'DATABASE_URL is not set' in caplog.text
