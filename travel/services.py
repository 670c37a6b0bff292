# travel/services.py

import logging

from django.conf import settings
from pydantic import ValidationError

from .api import ApiClient, decode_json
from .dtos import UserDTO
from .exceptions import ApiError
from .models import Destination, Guide, TokenResponse, Trip, TripRegistration
from .session import SessionState

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# 1. Shared resource behaviour
# ----------------------------------------------------------------------
class ApiResourceService:
    """
    Base class for services that wrap one API resource.

    List reads raise ApiError, single reads return None for 404,
    writes return True/False and log the failure.
    """
    resource = None
    record_class = None

    def __init__(self, api):
        self.api = api

    def _decode(self, parse, data, endpoint):
        try:
            return parse(data)
        except ValidationError as e:
            logger.error("Invalid %s data received from %s: %s", self.record_class.__name__, endpoint, e)
            raise ApiError(
                f"Invalid {self.record_class.__name__} data received from {endpoint} "
                f"({e.error_count()} field errors)"
            ) from e

    def _list(self, endpoint):
        data = self.api.get_json(endpoint)
        if data is None:
            return []
        if not isinstance(data, list):
            raise ApiError(f"Expected a list from {endpoint}, got {type(data).__name__}")
        return self._decode(self.record_class.from_api_list, data, endpoint)

    def _get(self, endpoint):
        try:
            data = self.api.get_json(endpoint)
        except ApiError as e:
            if e.status_code == 404:
                logger.warning("%s not found at %s", self.record_class.__name__, endpoint)
                return None
            raise
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ApiError(f"Expected an object from {endpoint}, got {type(data).__name__}")
        return self._decode(self.record_class.from_api, data, endpoint)

    def _send(self, method, endpoint, payload=None, action=''):
        try:
            response = self.api.request(method, endpoint, payload)
        except ApiError:
            logger.error("An error occurred while %s", action, exc_info=True)
            return None
        if not response.ok:
            logger.error("Failed %s: %s", action, response.status_code)
            return None
        return response

    def _write(self, method, endpoint, payload=None, action=''):
        return self._send(method, endpoint, payload, action) is not None


# ----------------------------------------------------------------------
# 2. Destinations
# ----------------------------------------------------------------------
class DestinationService(ApiResourceService):
    resource = 'Destination'
    record_class = Destination

    def get_all_destinations(self):
        return self._list(self.resource)

    def get_destination(self, destination_id):
        return self._get(f"{self.resource}/{destination_id}")

    def create_destination(self, destination):
        return self._write('POST', self.resource, destination.to_api(),
                           action="creating destination")

    def update_destination(self, destination):
        return self._write('PUT', f"{self.resource}/{destination.id}", destination.to_api(),
                           action=f"updating destination with ID {destination.id}")

    def delete_destination(self, destination_id):
        return self._write('DELETE', f"{self.resource}/{destination_id}",
                           action=f"deleting destination with ID {destination_id}")


# ----------------------------------------------------------------------
# 3. Trips
# ----------------------------------------------------------------------
class TripService(ApiResourceService):
    resource = 'Trip'
    record_class = Trip

    def get_all_trips(self):
        return self._list(self.resource)

    def get_trip(self, trip_id):
        return self._get(f"{self.resource}/{trip_id}")

    def get_trips_by_destination(self, destination_id):
        return self._list(f"{self.resource}/destination/{destination_id}")

    def create_trip(self, trip):
        return self._write('POST', self.resource, trip.to_api(), action="creating trip")

    def update_trip(self, trip):
        return self._write('PUT', f"{self.resource}/{trip.id}", trip.to_api(),
                           action=f"updating trip with ID {trip.id}")

    def delete_trip(self, trip_id):
        return self._write('DELETE', f"{self.resource}/{trip_id}",
                           action=f"deleting trip with ID {trip_id}")

    def assign_guide(self, trip_id, guide_id):
        return self._write('POST', f"{self.resource}/{trip_id}/guides/{guide_id}",
                           action=f"assigning guide {guide_id} to trip {trip_id}")

    def remove_guide(self, trip_id, guide_id):
        return self._write('DELETE', f"{self.resource}/{trip_id}/guides/{guide_id}",
                           action=f"removing guide {guide_id} from trip {trip_id}")


# ----------------------------------------------------------------------
# 4. Guides
# ----------------------------------------------------------------------
class GuideService(ApiResourceService):
    resource = 'Guide'
    record_class = Guide

    def get_all_guides(self):
        return self._list(self.resource)

    def get_guide(self, guide_id):
        return self._get(f"{self.resource}/{guide_id}")

    def get_guides_by_trip(self, trip_id):
        return self._list(f"Trip/{trip_id}/guides")

    def create_guide(self, guide):
        return self._write('POST', self.resource, guide.to_api(), action="creating guide")

    def update_guide(self, guide):
        return self._write('PUT', f"{self.resource}/{guide.id}", guide.to_api(),
                           action=f"updating guide with ID {guide.id}")

    def delete_guide(self, guide_id):
        return self._write('DELETE', f"{self.resource}/{guide_id}",
                           action=f"deleting guide with ID {guide_id}")


# ----------------------------------------------------------------------
# 5. Trip Registrations
# ----------------------------------------------------------------------
class TripRegistrationService(ApiResourceService):
    resource = 'TripRegistration'
    record_class = TripRegistration

    def get_all_trip_registrations(self):
        return self._list(self.resource)

    def get_user_registrations(self, user_id):
        return self._list(f"{self.resource}/user/{user_id}")

    def get_trip_registrations(self, trip_id):
        return self._list(f"{self.resource}/trip/{trip_id}")

    def get_registration(self, registration_id):
        return self._get(f"{self.resource}/{registration_id}")

    def create_registration(self, registration):
        """Books a trip. Returns the registration as stored by the API, or None."""
        response = self._send('POST', self.resource, registration.to_api(),
                              action="creating trip registration")
        if response is None:
            return None
        try:
            data = decode_json(response, self.resource)
            # Some API builds answer 201 with an empty body
            return TripRegistration.from_api(data) if data else registration
        except (ApiError, ValidationError):
            logger.error("Unreadable trip registration returned by the API", exc_info=True)
            return None

    def update_registration(self, registration):
        return self._write('PUT', f"{self.resource}/{registration.id}", registration.to_api(),
                           action=f"updating registration with ID {registration.id}")

    def cancel_registration(self, registration_id):
        return self._write('PUT', f"{self.resource}/{registration_id}/cancel",
                           action=f"cancelling registration with ID {registration_id}")

    def confirm_registration(self, registration_id):
        return self._write('PUT', f"{self.resource}/{registration_id}/confirm",
                           action=f"confirming registration with ID {registration_id}")


# ----------------------------------------------------------------------
# 6. Authentication
# ----------------------------------------------------------------------
class AuthService:
    """Logs users in and out against the API and keeps the token in the session."""

    def __init__(self, session_state, api):
        self.session_state = session_state
        self.api = api

    def login(self, username, password):
        try:
            response = self.api.post('auth/login', {'username': username, 'password': password})
        except ApiError:
            logger.error("Error during login for username: %s", username, exc_info=True)
            return False

        if not response.ok:
            logger.warning("Failed login attempt for username: %s. Error: %s", username, response.text)
            return False

        try:
            token_response = TokenResponse.from_api(decode_json(response, 'auth/login'))
        except (ApiError, ValidationError):
            logger.error("Unreadable login response for username: %s", username, exc_info=True)
            return False
        if not token_response.token:
            logger.warning("Login for %s returned no token", username)
            return False

        self.session_state.store(token_response)
        logger.info("User %s logged in successfully", username)
        return True

    def register(self, data):
        """``data`` holds the registration form's cleaned_data."""
        payload = {
            'username': data['username'],
            'email': data['email'],
            'password': data['password'],
            'confirmPassword': data['confirm_password'],
            'firstName': data.get('first_name', ''),
            'lastName': data.get('last_name', ''),
            'phoneNumber': data.get('phone_number', ''),
            'address': data.get('address', ''),
        }
        try:
            response = self.api.post('auth/register', payload)
        except ApiError:
            logger.error("Error during registration for username: %s", data['username'], exc_info=True)
            return False

        if not response.ok:
            logger.warning("Failed registration attempt for username: %s. Error: %s",
                           data['username'], response.text)
            return False

        logger.info("User %s registered successfully", data['username'])
        return True

    def change_password(self, current_password, new_password):
        try:
            response = self.api.post('auth/changepassword', {
                'currentPassword': current_password,
                'newPassword': new_password,
                'confirmNewPassword': new_password,
            })
        except ApiError:
            logger.error("Error changing password for %s", self.session_state.username, exc_info=True)
            return False
        if not response.ok:
            logger.warning("Password change rejected for %s: %s", self.session_state.username, response.status_code)
        return response.ok

    def logout(self):
        self.session_state.clear()

    def is_authenticated(self):
        return self.session_state.is_authenticated

    def is_admin(self):
        return self.session_state.is_admin

    def get_current_user(self):
        if not self.is_authenticated():
            return None
        try:
            data = self.api.get_json('user/profile')
            return UserDTO.from_api(data) if data else None
        except (ApiError, ValidationError):
            logger.error("Error getting current user", exc_info=True)
            return None


# ----------------------------------------------------------------------
# 7. Per-request factories
# ----------------------------------------------------------------------
def build_api_client(request):
    """
    The API client of this request. Every service built for the same request
    shares it; ApiClientMiddleware closes it once the response is ready.
    """
    client = getattr(request, 'api_client', None)
    if client is None:
        client = ApiClient(
            settings.API_BASE_URL,
            token=SessionState(request.session).token,
            timeout=settings.API_TIMEOUT,
            verify=settings.API_VERIFY_SSL,
        )
        request.api_client = client
    return client


def get_auth_service(request):
    return AuthService(SessionState(request.session), build_api_client(request))


def get_destination_service(request):
    return DestinationService(build_api_client(request))


def get_trip_service(request):
    return TripService(build_api_client(request))


def get_guide_service(request):
    return GuideService(build_api_client(request))


def get_registration_service(request):
    return TripRegistrationService(build_api_client(request))
