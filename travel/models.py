# travel/models.py
#
# Records exchanged with the backend API. Nothing here is persisted locally;
# the API owns the data, these classes only carry it to the templates.

from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from typing import Annotated, List, Optional

from django.utils import timezone
from pydantic import (
    AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, model_validator,
)
from pydantic.alias_generators import to_camel

# --- CONSTANTS ---
REGISTRATION_STATUS_CHOICES = [
    ('Pending', 'Pending'),
    ('Confirmed', 'Confirmed'),
    ('Cancelled', 'Cancelled'),
]


# --- Field types ---
def _date_part(value):
    # The API sends dates as midnight datetimes ('2030-06-01T00:00:00')
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and 'T' in value:
        return value.split('T', 1)[0]
    return value


def _as_utc(value):
    if timezone.is_naive(value):
        return timezone.make_aware(value, dt_timezone.utc)
    return value


ApiDate = Annotated[date, BeforeValidator(_date_part)]
ApiDateTime = Annotated[datetime, AfterValidator(_as_utc)]
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used='json')]


def _fold(key):
    return key.replace('_', '').lower()


# =========================================================================
# A. BASE RECORD
# =========================================================================

class ApiRecord(BaseModel):
    """
    Base for records decoded from API JSON.

    Keys are matched case-insensitively, so 'StartDate', 'startDate' and
    'start_date' all fill ``start_date``. Null values fall back to the field
    default. Records go back to the API as camelCase JSON; fields declared
    with ``exclude=True`` are display-only and never sent.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    @model_validator(mode='before')
    @classmethod
    def match_api_keys(cls, data):
        if not isinstance(data, dict):
            return data
        aliases = {}
        for name, info in cls.model_fields.items():
            aliases[_fold(name)] = info.alias or name
        matched = {}
        for key, value in data.items():
            alias = aliases.get(_fold(key))
            if alias is None or value is None:
                continue
            matched[alias] = value
        return matched

    @classmethod
    def from_api(cls, data):
        return cls.model_validate(data)

    @classmethod
    def from_api_list(cls, items):
        return [cls.from_api(item) for item in items or []]

    def to_api(self):
        return self.model_dump(mode='json', by_alias=True)


# =========================================================================
# B. DISPLAY RECORDS
# =========================================================================

# --- 1. Destination ---
class Destination(ApiRecord):
    id: int = 0
    name: str = ''
    description: str = ''
    country: str = ''
    city: str = ''
    climate: str = ''
    best_time_to_visit: str = ''
    image_url: str = ''

    @property
    def display_name(self):
        return f"{self.name}, {self.city}, {self.country}"

    def __str__(self):
        return self.display_name


# --- 2. Guide ---
class Guide(ApiRecord):
    id: int = 0
    name: str = ''
    bio: str = ''
    email: str = ''
    phone: str = ''
    image_url: str = ''
    years_of_experience: Optional[int] = None

    @property
    def display_name(self):
        return f"{self.name} ({self.years_of_experience or 0} years)"

    def __str__(self):
        return self.display_name


# --- 3. Trip ---
class Trip(ApiRecord):
    id: int = 0
    name: str = ''
    description: str = ''
    start_date: Optional[ApiDate] = None
    end_date: Optional[ApiDate] = None
    price: Money = Decimal('0.00')
    image_url: str = ''
    max_participants: int = 0
    destination_id: int = 0

    # Filled in by the API (or the trip list page) for display only
    destination_name: str = Field(default='', exclude=True)
    country: str = Field(default='', exclude=True)
    city: str = Field(default='', exclude=True)
    guides: List[Guide] = Field(default_factory=list, exclude=True)
    available_spots: int = Field(default=0, exclude=True)

    @property
    def duration(self):
        if not self.start_date or not self.end_date:
            return ''
        return f"{(self.end_date - self.start_date).days + 1} days"

    @property
    def is_sold_out(self):
        return self.available_spots <= 0

    @property
    def is_upcoming(self):
        return bool(self.start_date) and self.start_date > timezone.localdate()

    def __str__(self):
        return self.name


# --- 4. Trip Registration ---
class TripRegistration(ApiRecord):
    id: int = 0
    user_id: int = 0
    username: str = Field(default='', exclude=True)
    trip_id: int = 0
    trip_name: str = Field(default='', exclude=True)
    destination_name: str = Field(default='', exclude=True)
    start_date: Optional[ApiDate] = Field(default=None, exclude=True)
    end_date: Optional[ApiDate] = Field(default=None, exclude=True)
    registration_date: Optional[ApiDateTime] = None
    number_of_participants: int = 1
    total_price: Money = Decimal('0.00')
    status: str = 'Pending'
    special_requests: str = ''

    def _has_status(self, status):
        return self.status.lower() == status.lower()

    @property
    def is_confirmed(self):
        return self._has_status('Confirmed')

    @property
    def is_cancelled(self):
        return self._has_status('Cancelled')

    @property
    def is_pending(self):
        return self._has_status('Pending')

    @property
    def duration(self):
        if not self.start_date or not self.end_date:
            return ''
        return f"{(self.end_date - self.start_date).days + 1} days"

    @property
    def is_upcoming(self):
        return bool(self.start_date) and self.start_date > timezone.localdate()

    @property
    def is_past(self):
        return bool(self.end_date) and self.end_date < timezone.localdate()

    @property
    def is_active(self):
        if not self.start_date or not self.end_date:
            return False
        today = timezone.localdate()
        return self.start_date <= today <= self.end_date


# --- 5. Login Token ---
class TokenResponse(ApiRecord):
    token: str = ''
    username: str = ''
    is_admin: bool = False
    expires_at: Optional[ApiDateTime] = None
