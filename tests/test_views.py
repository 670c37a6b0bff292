from unittest.mock import MagicMock, patch

import pytest

from travel.dtos import UserDTO
from travel.exceptions import ApiError
from travel.models import Destination, Trip, TripRegistration
from travel.services import DestinationService


# ----------------------------------------------------------------------
# Logout
# ----------------------------------------------------------------------

def test_logout_page_renders_for_anonymous_user(client):
    auth = MagicMock()
    auth.is_authenticated.return_value = False
    with patch('travel.views.get_auth_service', return_value=auth):
        response = client.get('/account/logout/')

    assert response.status_code == 200
    assert b'You are not signed in.' in response.content
    auth.logout.assert_not_called()


def test_logout_clears_session_and_second_visit_is_noop(signed_in_client):
    response = signed_in_client.get('/account/logout/')
    assert response.status_code == 200
    assert b'You have been signed out.' in response.content
    assert 'Token' not in signed_in_client.session

    response = signed_in_client.get('/account/logout/')
    assert response.status_code == 200
    assert b'You are not signed in.' in response.content


# ----------------------------------------------------------------------
# API diagnostics
# ----------------------------------------------------------------------

def _patch_read_services(destinations=(), trips=(), guides=(), registrations=(), trip_error=None):
    destination_service, trip_service = MagicMock(), MagicMock()
    guide_service, registration_service = MagicMock(), MagicMock()
    destination_service.get_all_destinations.return_value = list(destinations)
    trip_service.get_all_trips.return_value = list(trips)
    if trip_error:
        trip_service.get_all_trips.side_effect = trip_error
    guide_service.get_all_guides.return_value = list(guides)
    registration_service.get_all_trip_registrations.return_value = list(registrations)
    return [
        patch('travel.views.get_destination_service', return_value=destination_service),
        patch('travel.views.get_trip_service', return_value=trip_service),
        patch('travel.views.get_guide_service', return_value=guide_service),
        patch('travel.views.get_registration_service', return_value=registration_service),
    ]


def _get_with(patches, client, url):
    for p in patches:
        p.start()
    try:
        return client.get(url)
    finally:
        for p in patches:
            p.stop()


def test_api_test_page_lists_results(client):
    patches = _patch_read_services(
        destinations=[Destination(id=1, name='Paris', city='Paris', country='France')],
        trips=[Trip(id=1, name='Seine Cruise')],
        registrations=[TripRegistration(id=1, username='ann', trip_name='Seine Cruise')],
    )
    response = _get_with(patches, client, '/api-test/')

    assert response.status_code == 200
    assert response.context['has_error'] is False
    assert len(response.context['destinations']) == 1
    assert b'Paris, Paris, France' in response.content
    assert b'All API services responded.' in response.content


def test_api_test_page_shows_error_but_still_renders(client):
    patches = _patch_read_services(
        destinations=[Destination(id=1, name='Paris')],
        trip_error=ApiError("GET Trip failed with status 500"),
    )
    response = _get_with(patches, client, '/api-test/')

    assert response.status_code == 200
    assert response.context['has_error'] is True
    assert len(response.context['destinations']) == 1
    assert response.context['trips'] == []
    assert b'GET Trip failed with status 500' in response.content


# ----------------------------------------------------------------------
# Access control
# ----------------------------------------------------------------------

def test_admin_page_redirects_anonymous_user_to_login(client):
    response = client.get('/destinations/new/')
    assert response.status_code == 302
    assert response['Location'] == '/account/login/?next=%2Fdestinations%2Fnew%2F'


def test_admin_page_forbidden_for_regular_user(signed_in_client):
    response = signed_in_client.get('/destinations/new/')
    assert response.status_code == 403


def test_admin_page_available_to_admin(admin_client):
    response = admin_client.get('/destinations/new/')
    assert response.status_code == 200
    assert b'name="country"' in response.content


def test_bookings_require_login(client):
    response = client.get('/bookings/')
    assert response.status_code == 302
    assert response['Location'].startswith('/account/login/')


# ----------------------------------------------------------------------
# Listing pages
# ----------------------------------------------------------------------

def test_trip_list_fills_destination_names(client):
    destination_service, trip_service = MagicMock(), MagicMock()
    destination_service.get_all_destinations.return_value = [Destination(id=4, name='Oslo')]
    trip_service.get_trips_by_destination.return_value = [Trip(id=1, name='Fjords', destination_id=4)]

    with patch('travel.views.get_destination_service', return_value=destination_service), \
            patch('travel.views.get_trip_service', return_value=trip_service):
        response = client.get('/trips/?destination=4')

    assert response.status_code == 200
    trip_service.get_trips_by_destination.assert_called_once_with(4)
    assert response.context['trips'][0].destination_name == 'Oslo'
    assert response.context['selected_destination'] == 4


def test_trip_list_shows_api_error(client):
    destination_service = MagicMock()
    destination_service.get_all_destinations.side_effect = ApiError("Could not reach the API")
    with patch('travel.views.get_destination_service', return_value=destination_service), \
            patch('travel.views.get_trip_service', return_value=MagicMock()):
        response = client.get('/trips/')

    assert response.status_code == 200
    assert response.context['error_message'] == "Error loading trips: Could not reach the API"


def test_trip_detail_404_when_missing(client):
    trip_service = MagicMock()
    trip_service.get_trip.return_value = None
    with patch('travel.views.get_trip_service', return_value=trip_service):
        response = client.get('/trips/12/')
    assert response.status_code == 404


# ----------------------------------------------------------------------
# Login and booking
# ----------------------------------------------------------------------

def test_login_success_redirects_to_next(client):
    auth = MagicMock()
    auth.is_authenticated.return_value = False
    auth.login.return_value = True
    with patch('travel.views.get_auth_service', return_value=auth):
        response = client.post('/account/login/', {'username': 'ann', 'password': 'pw', 'next': '/bookings/'})

    assert response.status_code == 302
    assert response['Location'] == '/bookings/'
    auth.login.assert_called_once_with('ann', 'pw')


def test_login_failure_rerenders_form(client):
    auth = MagicMock()
    auth.is_authenticated.return_value = False
    auth.login.return_value = False
    with patch('travel.views.get_auth_service', return_value=auth):
        response = client.post('/account/login/', {'username': 'ann', 'password': 'bad'})

    assert response.status_code == 200
    assert b'Invalid username or password.' in response.content


@pytest.fixture
def booking_services():
    trip_service, registration_service, auth = MagicMock(), MagicMock(), MagicMock()
    trip_service.get_trip.return_value = Trip(id=5, name='Alps', available_spots=2, price=100)
    auth.get_current_user.return_value = UserDTO(id=3, username='ann')
    registration_service.create_registration.side_effect = lambda r: TripRegistration(
        id=77, trip_id=r.trip_id, user_id=r.user_id, number_of_participants=r.number_of_participants)
    with patch('travel.views.get_trip_service', return_value=trip_service), \
            patch('travel.views.get_registration_service', return_value=registration_service), \
            patch('travel.views.get_auth_service', return_value=auth):
        yield trip_service, registration_service


def test_booking_creates_registration(signed_in_client, booking_services):
    _, registration_service = booking_services
    response = signed_in_client.post('/trips/5/book/', {'number_of_participants': 2})

    assert response.status_code == 302
    assert response['Location'] == '/bookings/'
    registration = registration_service.create_registration.call_args.args[0]
    assert (registration.trip_id, registration.user_id, registration.number_of_participants) == (5, 3, 2)
    assert registration.total_price == 200


def test_booking_rejects_more_participants_than_spots(signed_in_client, booking_services):
    _, registration_service = booking_services
    response = signed_in_client.post('/trips/5/book/', {'number_of_participants': 3})

    assert response.status_code == 200
    assert b'Only 2 spots available for this trip.' in response.content
    registration_service.create_registration.assert_not_called()


def test_booking_sold_out_trip_redirects(signed_in_client, booking_services):
    trip_service, _ = booking_services
    trip_service.get_trip.return_value = Trip(id=5, name='Alps', available_spots=0)
    response = signed_in_client.get('/trips/5/book/')
    assert response.status_code == 302
    assert response['Location'] == '/trips/5/'


def test_destination_list_shows_banner_for_malformed_payload(client):
    api = MagicMock()
    api.get_json.return_value = {'message': 'maintenance'}
    with patch('travel.views.get_destination_service', return_value=DestinationService(api)):
        response = client.get('/destinations/')

    assert response.status_code == 200
    assert response.context['error_message'] == "Failed to load destinations. Please try again later."
    assert response.context['destinations'] == []
