"""Tests for court filter state and client-side filtering."""
from datetime import date

from tracket.services.court_filters import (
    CourtFilters, available_options, courts_with_coordinates, favorite_key,
    filter_courts, split_favorite_key,
)

COURTS = [
    {
        'clubName': 'Padel Town', 'clubLocation': 'Dubai', 'playCount': 5,
        'totalDuration': 450, 'lastPlayed': '2025-08-03',
        'sports': ['padel'], 'activityTypes': ['friendly', 'tournament'],
        'players': ['Alvaro', 'Ricardo', 'Tomas'],
        'coordinates': {'lat': 25.14, 'lng': 55.25},
    },
    {
        'clubName': 'Hamlin Tennis Center', 'clubLocation': 'Philadelphia', 'playCount': 3,
        'totalDuration': 160, 'lastPlayed': '2024-10-06',
        'sports': ['tennis'], 'activityTypes': ['friendly'],
        'players': ['Ana'],
    },
    {
        'clubName': 'PADELphia', 'clubLocation': 'Bala Cynwyd', 'playCount': 2,
        'totalDuration': 200, 'lastPlayed': '2023-11-15',
        'sports': ['padel'], 'activityTypes': ['training'],
        'players': ['Daniel'],
        'coordinates': {'lat': float('nan'), 'lng': -75.2},
    },
]


def test_from_mapping_ignores_blank_values():
    filters = CourtFilters.from_mapping({
        'sport': 'padel', 'player': '  ', 'activityType': '', 'dateRange': 'bogus',
    })
    assert filters == CourtFilters(sport='padel')
    assert filters.to_query_params() == {'sport': 'padel'}


def test_active_count_and_clear():
    filters = CourtFilters(sport='padel', player='ana', start_date='2024-01-01')
    assert filters.active_count() == 3
    assert filters.has_active() is True
    cleared = filters.cleared()
    assert cleared == CourtFilters()
    assert cleared.active_count() == 0


def test_date_range_presets():
    today = date(2025, 3, 14)
    this_year = CourtFilters().with_date_range('this-year', today=today)
    assert (this_year.start_date, this_year.end_date) == ('2025-01-01', '2025-12-31')

    last_year = this_year.with_date_range('last-year', today=today)
    assert (last_year.start_date, last_year.end_date) == ('2024-01-01', '2024-12-31')

    custom = CourtFilters(start_date='2024-02-01').with_date_range('custom', today=today)
    assert custom.date_range == 'custom'
    assert custom.start_date == '2024-02-01'

    all_time = last_year.with_date_range('all-time', today=today)
    assert all_time == CourtFilters()


def test_filter_courts_by_membership_and_player():
    assert [c['clubName'] for c in filter_courts(COURTS, CourtFilters(sport='padel'))] == [
        'Padel Town', 'PADELphia',
    ]
    assert [c['clubName'] for c in filter_courts(COURTS, CourtFilters(activity_type='training'))] == [
        'PADELphia',
    ]
    assert [c['clubName'] for c in filter_courts(COURTS, CourtFilters(player='AN'))] == [
        'Hamlin Tennis Center', 'PADELphia',
    ]


def test_filter_courts_by_last_played():
    filters = CourtFilters(start_date='2024-01-01', end_date='2024-12-31')
    assert [c['clubName'] for c in filter_courts(COURTS, filters)] == ['Hamlin Tennis Center']


def test_favorites_only_intersects_with_favorite_set():
    favorites = [favorite_key('PADELphia', 'Bala Cynwyd')]
    visible = filter_courts(COURTS, favorites=favorites, only_favorites=True)
    assert [c['clubName'] for c in visible] == ['PADELphia']

    assert len(filter_courts(COURTS, favorites=favorites, only_favorites=False)) == 3


def test_available_options_sorted_unique():
    options = available_options(COURTS)
    assert options['sports'] == ['padel', 'tennis']
    assert options['activityTypes'] == ['friendly', 'tournament', 'training']
    assert options['players'] == ['Alvaro', 'Ana', 'Daniel', 'Ricardo', 'Tomas']


def test_courts_with_coordinates_ignores_non_finite():
    assert courts_with_coordinates(COURTS) == 1


def test_favorite_key_round_trip():
    assert favorite_key('Club A', None) == 'Club A|'
    assert split_favorite_key('Club A|Location A') == ('Club A', 'Location A')
    assert split_favorite_key('Club A|') == ('Club A', '')
