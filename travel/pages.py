# travel/pages.py
#
# Page handlers that do more than fetch-and-render. Services are passed in
# explicitly so each handler can be driven without a running API.

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class ServiceResult:
    """Outcome of one service call: either its payload or the error it raised."""
    data: list = field(default_factory=list)
    error: Exception = None

    @property
    def ok(self):
        return self.error is None


def call_service(fetch):
    try:
        return ServiceResult(data=fetch())
    except Exception as e:
        return ServiceResult(error=e)


# ----------------------------------------------------------------------
# 1. Logout
# ----------------------------------------------------------------------
class LogoutPage:

    def __init__(self, auth_service):
        self.auth_service = auth_service
        self.logged_out = False

    def on_get(self):
        # Failures from logout() are left to Django's error handling
        if self.auth_service.is_authenticated():
            self.auth_service.logout()
            logger.info("User logged out")
            self.logged_out = True

    def get_context(self):
        return {'logged_out': self.logged_out, 'title': 'Signed Out'}


# ----------------------------------------------------------------------
# 2. API diagnostics
# ----------------------------------------------------------------------
class ApiTestPage:
    """
    Calls every read service once, in a fixed order, and keeps what came back.

    The first failing call stops the sequence; lists fetched before it keep
    their data and ``error_message`` describes the failure.
    """

    def __init__(self, destination_service, trip_service, guide_service, registration_service):
        self.destination_service = destination_service
        self.trip_service = trip_service
        self.guide_service = guide_service
        self.registration_service = registration_service

        self.destinations = []
        self.trips = []
        self.guides = []
        self.trip_registrations = []
        self.error_message = ''

    @property
    def has_error(self):
        return bool(self.error_message)

    def steps(self):
        return [
            ('destinations', 'destinations', self.destination_service.get_all_destinations),
            ('trips', 'trips', self.trip_service.get_all_trips),
            ('guides', 'guides', self.guide_service.get_all_guides),
            ('trip_registrations', 'trip registrations',
             self.registration_service.get_all_trip_registrations),
        ]

    def on_get(self):
        for attr, label, fetch in self.steps():
            result = call_service(fetch)
            if not result.ok:
                self.error_message = f"Error occurred while testing API services: {result.error}"
                logger.error("Error occurred during API testing", exc_info=result.error)
                return
            setattr(self, attr, result.data)
            logger.info("Retrieved %d %s", len(result.data), label)

    def get_context(self):
        return {
            'destinations': self.destinations,
            'trips': self.trips,
            'guides': self.guides,
            'trip_registrations': self.trip_registrations,
            'error_message': self.error_message,
            'has_error': self.has_error,
            'title': 'API Test',
        }
