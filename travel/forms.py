from django import forms
from django.core.exceptions import ValidationError
from django.utils import timezone
from decimal import Decimal

from .models import Destination, Guide, Trip, TripRegistration

TEXT = {'class': 'form-control'}
DATE = {'type': 'date', 'class': 'form-control'}


class RecordForm(forms.Form):
    """A form editing one API record: initial values come from it, cleaned data goes back into it."""
    record_class = None

    @classmethod
    def for_record(cls, record, **kwargs):
        return cls(initial=record.model_dump(), **kwargs)

    def to_record(self, record_id=0):
        names = set(self.record_class.model_fields)
        values = {k: v for k, v in self.cleaned_data.items() if k in names}
        values['id'] = record_id
        return self.record_class(**values)


# ----------------------------------------------------------------------
# 1. Account Forms
# ----------------------------------------------------------------------
class LoginForm(forms.Form):
    username = forms.CharField(max_length=100, widget=forms.TextInput(attrs=TEXT))
    password = forms.CharField(widget=forms.PasswordInput(attrs=TEXT))


class RegisterForm(forms.Form):
    username = forms.CharField(min_length=3, max_length=100, widget=forms.TextInput(attrs=TEXT))
    email = forms.EmailField(max_length=100, widget=forms.EmailInput(attrs=TEXT))
    password = forms.CharField(min_length=6, max_length=100, widget=forms.PasswordInput(attrs=TEXT))
    confirm_password = forms.CharField(label="Confirm Password", widget=forms.PasswordInput(attrs=TEXT))
    first_name = forms.CharField(max_length=50, required=False, widget=forms.TextInput(attrs=TEXT))
    last_name = forms.CharField(max_length=50, required=False, widget=forms.TextInput(attrs=TEXT))
    phone_number = forms.CharField(max_length=20, required=False, widget=forms.TextInput(attrs=TEXT))
    address = forms.CharField(max_length=200, required=False, widget=forms.TextInput(attrs=TEXT))

    def clean(self):
        cleaned_data = super().clean()
        password = cleaned_data.get('password')
        confirm = cleaned_data.get('confirm_password')
        if password and confirm and password != confirm:
            raise ValidationError("The password and confirmation password do not match.")
        return cleaned_data


class ChangePasswordForm(forms.Form):
    current_password = forms.CharField(label="Current Password", widget=forms.PasswordInput(attrs=TEXT))
    new_password = forms.CharField(label="New Password", min_length=6, max_length=100,
                                   widget=forms.PasswordInput(attrs=TEXT))
    confirm_new_password = forms.CharField(label="Confirm New Password", widget=forms.PasswordInput(attrs=TEXT))

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('new_password') != cleaned_data.get('confirm_new_password'):
            raise ValidationError("The new password and confirmation password do not match.")
        return cleaned_data


# ----------------------------------------------------------------------
# 2. Destination Form
# ----------------------------------------------------------------------
class DestinationForm(RecordForm):
    record_class = Destination

    name = forms.CharField(max_length=100, widget=forms.TextInput(attrs=TEXT))
    description = forms.CharField(max_length=500, required=False, widget=forms.Textarea(attrs={**TEXT, 'rows': 3}))
    country = forms.CharField(max_length=100, widget=forms.TextInput(attrs=TEXT))
    city = forms.CharField(max_length=100, widget=forms.TextInput(attrs=TEXT))
    climate = forms.CharField(max_length=50, required=False, widget=forms.TextInput(attrs=TEXT))
    best_time_to_visit = forms.CharField(label="Best Time to Visit", max_length=100, required=False,
                                         widget=forms.TextInput(attrs=TEXT))
    image_url = forms.URLField(label="Image URL", max_length=500, required=False, assume_scheme='https',
                               widget=forms.URLInput(attrs=TEXT))


# ----------------------------------------------------------------------
# 3. Trip Form
# ----------------------------------------------------------------------
class TripForm(RecordForm):
    record_class = Trip

    name = forms.CharField(max_length=100, widget=forms.TextInput(attrs=TEXT))
    description = forms.CharField(max_length=500, required=False, widget=forms.Textarea(attrs={**TEXT, 'rows': 3}))
    start_date = forms.DateField(label="Start Date", widget=forms.DateInput(attrs=DATE))
    end_date = forms.DateField(label="End Date", widget=forms.DateInput(attrs=DATE))
    price = forms.DecimalField(min_value=Decimal('0.01'), decimal_places=2,
                               widget=forms.NumberInput(attrs={**TEXT, 'step': '0.01'}))
    image_url = forms.URLField(label="Image URL", max_length=500, required=False, assume_scheme='https',
                               widget=forms.URLInput(attrs=TEXT))
    max_participants = forms.IntegerField(label="Maximum Participants", min_value=1,
                                          widget=forms.NumberInput(attrs=TEXT))
    destination_id = forms.TypedChoiceField(label="Destination", coerce=int,
                                            widget=forms.Select(attrs=TEXT))

    def __init__(self, *args, destinations=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['destination_id'].choices = [('', 'Select Destination')] + [
            (d.id, d.name) for d in destinations
        ]

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get('start_date')
        end = cleaned_data.get('end_date')
        if start and end and end < start:
            raise ValidationError("End date must be on or after the start date.")
        return cleaned_data


# ----------------------------------------------------------------------
# 4. Guide Form
# ----------------------------------------------------------------------
class GuideForm(RecordForm):
    record_class = Guide

    name = forms.CharField(max_length=100, widget=forms.TextInput(attrs=TEXT))
    bio = forms.CharField(max_length=500, required=False, widget=forms.Textarea(attrs={**TEXT, 'rows': 3}))
    email = forms.EmailField(max_length=100, widget=forms.EmailInput(attrs=TEXT))
    phone = forms.CharField(max_length=20, required=False, widget=forms.TextInput(attrs=TEXT))
    image_url = forms.URLField(label="Image URL", max_length=500, required=False, assume_scheme='https',
                               widget=forms.URLInput(attrs=TEXT))
    years_of_experience = forms.IntegerField(label="Years of Experience", min_value=0, max_value=100,
                                             required=False, widget=forms.NumberInput(attrs=TEXT))


# ----------------------------------------------------------------------
# 5. Booking Form
# ----------------------------------------------------------------------
class BookingForm(forms.Form):
    number_of_participants = forms.IntegerField(
        label="Number of Participants", min_value=1, max_value=20, initial=1,
        widget=forms.NumberInput(attrs=TEXT),
    )
    special_requests = forms.CharField(
        label="Special Requests", max_length=500, required=False,
        widget=forms.Textarea(attrs={**TEXT, 'rows': 3}),
    )

    def __init__(self, *args, trip=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.trip = trip

    def clean_number_of_participants(self):
        participants = self.cleaned_data['number_of_participants']
        if self.trip is not None and participants > self.trip.available_spots:
            raise ValidationError(f"Only {self.trip.available_spots} spots available for this trip.")
        return participants

    def to_registration(self, user_id):
        participants = self.cleaned_data['number_of_participants']
        return TripRegistration(
            user_id=user_id,
            trip_id=self.trip.id,
            number_of_participants=participants,
            registration_date=timezone.now(),
            total_price=self.trip.price * participants,
            special_requests=self.cleaned_data.get('special_requests') or '',
            status='Pending',
        )
