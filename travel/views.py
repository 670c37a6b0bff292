# travel/views.py

import logging

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from .decorators import admin_required, session_login_required
from .exceptions import ApiError
from .forms import (
    LoginForm, RegisterForm, ChangePasswordForm,
    DestinationForm, TripForm, GuideForm, BookingForm,
)
from .pages import ApiTestPage, LogoutPage
from .services import (
    get_auth_service, get_destination_service, get_trip_service,
    get_guide_service, get_registration_service,
)

logger = logging.getLogger(__name__)


def _or_404(record, label):
    if record is None:
        raise Http404(f"{label} not found.")
    return record


def _safe_next(request, fallback='index'):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(
        next_url, allowed_hosts={request.get_host()}, require_https=request.is_secure()
    ):
        return next_url
    return fallback


# ----------------------------------------------------------------------
# 1. Home
# ----------------------------------------------------------------------
def index(request):
    """Landing page listing the upcoming trips."""
    trips, error_message = [], None
    try:
        trips = [t for t in get_trip_service(request).get_all_trips() if t.is_upcoming]
        trips.sort(key=lambda t: t.start_date)
    except ApiError as e:
        logger.error("Error loading upcoming trips: %s", e)
        error_message = "Failed to load trips. Please try again later."
    context = {'trips': trips, 'error_message': error_message, 'title': 'Upcoming Trips'}
    return render(request, 'travel/trip_list.html', context)


# ----------------------------------------------------------------------
# 2. Account Views
# ----------------------------------------------------------------------
def login_view(request):
    auth = get_auth_service(request)
    if auth.is_authenticated():
        return redirect('index')

    if request.method == 'POST':
        form = LoginForm(request.POST)
        if form.is_valid():
            if auth.login(form.cleaned_data['username'], form.cleaned_data['password']):
                request.session.cycle_key()
                messages.success(request, f"Welcome back, {form.cleaned_data['username']}!")
                return redirect(_safe_next(request))
            form.add_error(None, "Invalid username or password.")
    else:
        form = LoginForm()

    context = {'form': form, 'next': request.GET.get('next', ''), 'title': 'Log In', 'submit_label': 'Log In'}
    return render(request, 'travel/form.html', context)


def register_view(request):
    auth = get_auth_service(request)
    if request.method == 'POST':
        form = RegisterForm(request.POST)
        if form.is_valid():
            if auth.register(form.cleaned_data):
                messages.success(request, "Registration successful. You can now log in.")
                return redirect('login')
            form.add_error(None, "Registration failed. The username or email may already be in use.")
    else:
        form = RegisterForm()

    context = {'form': form, 'title': 'Create an Account', 'submit_label': 'Register'}
    return render(request, 'travel/form.html', context)


def logout_view(request):
    """Signs the user out (if signed in) and always shows the confirmation page."""
    page = LogoutPage(get_auth_service(request))
    page.on_get()
    return render(request, 'travel/logout.html', page.get_context())


@session_login_required
def profile(request):
    user = get_auth_service(request).get_current_user()
    if user is None:
        messages.error(request, "Your profile could not be loaded. Please try again later.")
    return render(request, 'travel/profile.html', {'user_profile': user, 'title': 'My Profile'})


@session_login_required
def change_password(request):
    if request.method == 'POST':
        form = ChangePasswordForm(request.POST)
        if form.is_valid():
            changed = get_auth_service(request).change_password(
                form.cleaned_data['current_password'], form.cleaned_data['new_password']
            )
            if changed:
                messages.success(request, "Your password has been changed.")
                return redirect('profile')
            form.add_error(None, "The password could not be changed. Check your current password.")
    else:
        form = ChangePasswordForm()
    context = {'form': form, 'title': 'Change Password', 'submit_label': 'Change Password'}
    return render(request, 'travel/form.html', context)


# ----------------------------------------------------------------------
# 3. Destination Views
# ----------------------------------------------------------------------
def destination_list(request):
    destinations, error_message = [], None
    try:
        destinations = get_destination_service(request).get_all_destinations()
    except ApiError as e:
        logger.error("Error loading destinations: %s", e)
        error_message = "Failed to load destinations. Please try again later."
    context = {'destinations': destinations, 'error_message': error_message, 'title': 'Destinations'}
    return render(request, 'travel/destination_list.html', context)


@admin_required
def destination_create(request):
    if request.method == 'POST':
        form = DestinationForm(request.POST)
        if form.is_valid():
            destination = form.to_record()
            if get_destination_service(request).create_destination(destination):
                logger.info("Successfully created destination: %s", destination.name)
                messages.success(request, "Destination created successfully!")
                return redirect('destination_list')
            messages.error(request, "Failed to create destination. Please try again.")
    else:
        form = DestinationForm()
    context = {'form': form, 'title': 'Add Destination', 'submit_label': 'Create'}
    return render(request, 'travel/form.html', context)


@admin_required
def destination_update(request, pk):
    service = get_destination_service(request)
    destination = _or_404(service.get_destination(pk), "Destination")
    if request.method == 'POST':
        form = DestinationForm(request.POST)
        if form.is_valid():
            if service.update_destination(form.to_record(pk)):
                messages.success(request, f"Destination '{form.cleaned_data['name']}' updated.")
                return redirect('destination_list')
            messages.error(request, "Failed to update destination. Please try again.")
    else:
        form = DestinationForm.for_record(destination)
    context = {'form': form, 'title': f'Edit {destination.name}', 'submit_label': 'Save'}
    return render(request, 'travel/form.html', context)


@admin_required
def destination_delete(request, pk):
    service = get_destination_service(request)
    destination = _or_404(service.get_destination(pk), "Destination")
    if request.method == 'POST':
        if service.delete_destination(pk):
            messages.success(request, f"Destination '{destination.name}' deleted.")
            return redirect('destination_list')
        messages.error(request, "Failed to delete destination. It may still have trips.")
    context = {'object': destination, 'cancel_url': 'destination_list', 'title': f'Delete {destination.name}'}
    return render(request, 'travel/confirm_delete.html', context)


# ----------------------------------------------------------------------
# 4. Trip Views
# ----------------------------------------------------------------------
def trip_list(request):
    """All trips, optionally narrowed to one destination with ?destination=<id>."""
    trips, destinations, error_message = [], [], None
    destination_id = request.GET.get('destination')
    selected = int(destination_id) if destination_id and destination_id.isdigit() else None
    try:
        destinations = get_destination_service(request).get_all_destinations()
        trip_service = get_trip_service(request)
        if selected:
            trips = trip_service.get_trips_by_destination(selected)
        else:
            trips = trip_service.get_all_trips()

        names = {d.id: d.name for d in destinations}
        for trip in trips:
            if trip.destination_id in names:
                trip.destination_name = names[trip.destination_id]
    except ApiError as e:
        logger.error("Error loading trips: %s", e)
        error_message = f"Error loading trips: {e}"

    context = {
        'trips': trips,
        'destinations': destinations,
        'selected_destination': selected,
        'error_message': error_message,
        'title': 'Trips',
    }
    return render(request, 'travel/trip_list.html', context)


def trip_detail(request, pk):
    trip = _or_404(get_trip_service(request).get_trip(pk), "Trip")
    guides = trip.guides
    all_guides = []
    try:
        if not guides:
            guides = get_guide_service(request).get_guides_by_trip(pk)
        if get_auth_service(request).is_admin():
            assigned = {g.id for g in guides}
            all_guides = [g for g in get_guide_service(request).get_all_guides() if g.id not in assigned]
    except ApiError as e:
        logger.error("Error loading guides for trip %s: %s", pk, e)
        messages.warning(request, "Guide information is currently unavailable.")

    context = {'trip': trip, 'guides': guides, 'available_guides': all_guides, 'title': trip.name}
    return render(request, 'travel/trip_detail.html', context)


@admin_required
def trip_create(request):
    try:
        destinations = get_destination_service(request).get_all_destinations()
    except ApiError as e:
        logger.error("Error loading destinations for trip form: %s", e)
        messages.error(request, "Destinations could not be loaded, so trips cannot be created right now.")
        return redirect('trip_list')

    if request.method == 'POST':
        form = TripForm(request.POST, destinations=destinations)
        if form.is_valid():
            trip = form.to_record()
            if get_trip_service(request).create_trip(trip):
                messages.success(request, f"Trip '{trip.name}' created.")
                return redirect('trip_list')
            messages.error(request, "Failed to create trip. Please try again.")
    else:
        form = TripForm(destinations=destinations)
    context = {'form': form, 'title': 'Create New Trip', 'submit_label': 'Create'}
    return render(request, 'travel/form.html', context)


@admin_required
def trip_update(request, pk):
    service = get_trip_service(request)
    trip = _or_404(service.get_trip(pk), "Trip")
    try:
        destinations = get_destination_service(request).get_all_destinations()
    except ApiError as e:
        logger.error("Error loading destinations for trip form: %s", e)
        messages.error(request, "Destinations could not be loaded, so the trip cannot be edited right now.")
        return redirect('trip_detail', pk=pk)

    if request.method == 'POST':
        form = TripForm(request.POST, destinations=destinations)
        if form.is_valid():
            if service.update_trip(form.to_record(pk)):
                messages.success(request, f"Trip {pk} updated successfully.")
                return redirect('trip_detail', pk=pk)
            messages.error(request, "Failed to update trip. Please try again.")
    else:
        form = TripForm.for_record(trip, destinations=destinations)
    context = {'form': form, 'trip': trip, 'title': f'Update Trip: {trip.name}', 'submit_label': 'Save'}
    return render(request, 'travel/form.html', context)


@admin_required
def trip_delete(request, pk):
    service = get_trip_service(request)
    trip = _or_404(service.get_trip(pk), "Trip")
    if request.method == 'POST':
        if service.delete_trip(pk):
            messages.success(request, f"Trip '{trip.name}' deleted.")
            return redirect('trip_list')
        messages.error(request, "Failed to delete trip. It may have active bookings.")
    context = {'object': trip, 'cancel_url': 'trip_list', 'title': f'Delete {trip.name}'}
    return render(request, 'travel/confirm_delete.html', context)


@require_POST
@admin_required
def trip_assign_guide(request, pk, guide_id):
    if get_trip_service(request).assign_guide(pk, guide_id):
        messages.success(request, "Guide assigned to trip.")
    else:
        messages.error(request, "Failed to assign guide.")
    return redirect('trip_detail', pk=pk)


@require_POST
@admin_required
def trip_remove_guide(request, pk, guide_id):
    if get_trip_service(request).remove_guide(pk, guide_id):
        messages.success(request, "Guide removed from trip.")
    else:
        messages.error(request, "Failed to remove guide.")
    return redirect('trip_detail', pk=pk)


# ----------------------------------------------------------------------
# 5. Guide Views
# ----------------------------------------------------------------------
def guide_list(request):
    guides, error_message = [], None
    try:
        guides = get_guide_service(request).get_all_guides()
    except ApiError as e:
        logger.error("Error loading guides: %s", e)
        error_message = "Failed to load guides. Please try again later."
    context = {'guides': guides, 'error_message': error_message, 'title': 'Guides'}
    return render(request, 'travel/guide_list.html', context)


@admin_required
def guide_create(request):
    if request.method == 'POST':
        form = GuideForm(request.POST)
        if form.is_valid():
            guide = form.to_record()
            if get_guide_service(request).create_guide(guide):
                messages.success(request, f"Guide '{guide.name}' created.")
                return redirect('guide_list')
            messages.error(request, "Failed to create guide. Please try again.")
    else:
        form = GuideForm()
    context = {'form': form, 'title': 'Add Guide', 'submit_label': 'Create'}
    return render(request, 'travel/form.html', context)


@admin_required
def guide_update(request, pk):
    service = get_guide_service(request)
    guide = _or_404(service.get_guide(pk), "Guide")
    if request.method == 'POST':
        form = GuideForm(request.POST)
        if form.is_valid():
            if service.update_guide(form.to_record(pk)):
                messages.success(request, f"Guide '{form.cleaned_data['name']}' updated.")
                return redirect('guide_list')
            messages.error(request, "Failed to update guide. Please try again.")
    else:
        form = GuideForm.for_record(guide)
    context = {'form': form, 'title': f'Edit {guide.name}', 'submit_label': 'Save'}
    return render(request, 'travel/form.html', context)


@admin_required
def guide_delete(request, pk):
    service = get_guide_service(request)
    guide = _or_404(service.get_guide(pk), "Guide")
    if request.method == 'POST':
        if service.delete_guide(pk):
            messages.success(request, f"Guide '{guide.name}' deleted.")
            return redirect('guide_list')
        messages.error(request, "Failed to delete guide.")
    context = {'object': guide, 'cancel_url': 'guide_list', 'title': f'Delete {guide.name}'}
    return render(request, 'travel/confirm_delete.html', context)


# ----------------------------------------------------------------------
# 6. Booking Views
# ----------------------------------------------------------------------
@session_login_required
def trip_book(request, pk):
    trip = _or_404(get_trip_service(request).get_trip(pk), "Trip")
    if trip.is_sold_out:
        messages.error(request, "This trip is fully booked. Please select another trip.")
        return redirect('trip_detail', pk=pk)

    if request.method == 'POST':
        form = BookingForm(request.POST, trip=trip)
        if form.is_valid():
            user = get_auth_service(request).get_current_user()
            if user is None:
                messages.error(request, "You must be logged in to book a trip.")
                return redirect('login')

            registration = get_registration_service(request).create_registration(
                form.to_registration(user.id)
            )
            if registration is not None:
                logger.info("Trip booking successful: TripId: %s, UserId: %s, BookingId: %s",
                            trip.id, user.id, registration.id)
                messages.success(request, "Your trip booking was successful! "
                                          "You can view your booking details under 'My Bookings'.")
                return redirect('my_bookings')
            form.add_error(None, "Unable to complete your booking. Please try again later.")
    else:
        form = BookingForm(trip=trip)

    context = {'form': form, 'trip': trip, 'title': f'Book {trip.name}', 'submit_label': 'Book Now'}
    return render(request, 'travel/form.html', context)


@session_login_required
def my_bookings(request):
    registrations, error_message = [], None
    user = get_auth_service(request).get_current_user()
    if user is None:
        error_message = "Your bookings could not be loaded. Please try again later."
    else:
        try:
            registrations = get_registration_service(request).get_user_registrations(user.id)
        except ApiError as e:
            logger.error("Error loading bookings for user %s: %s", user.id, e)
            error_message = "Your bookings could not be loaded. Please try again later."
    context = {'registrations': registrations, 'error_message': error_message, 'title': 'My Bookings'}
    return render(request, 'travel/booking_list.html', context)


@admin_required
def registration_list(request):
    registrations, error_message = [], None
    try:
        registrations = get_registration_service(request).get_all_trip_registrations()
    except ApiError as e:
        logger.error("Error loading trip registrations: %s", e)
        error_message = "Trip registrations could not be loaded. Please try again later."
    context = {
        'registrations': registrations,
        'error_message': error_message,
        'show_users': True,
        'title': 'All Bookings',
    }
    return render(request, 'travel/booking_list.html', context)


@require_POST
@session_login_required
def registration_cancel(request, pk):
    if get_registration_service(request).cancel_registration(pk):
        messages.success(request, "Your booking has been cancelled.")
    else:
        messages.error(request, "The booking could not be cancelled.")
    return redirect(_safe_next(request, fallback='my_bookings'))


@require_POST
@admin_required
def registration_confirm(request, pk):
    if get_registration_service(request).confirm_registration(pk):
        messages.success(request, f"Booking {pk} confirmed.")
    else:
        messages.error(request, f"Booking {pk} could not be confirmed.")
    return redirect('registration_list')


# ----------------------------------------------------------------------
# 7. API Diagnostics
# ----------------------------------------------------------------------
def api_test(request):
    page = ApiTestPage(
        get_destination_service(request),
        get_trip_service(request),
        get_guide_service(request),
        get_registration_service(request),
    )
    page.on_get()
    return render(request, 'travel/api_test.html', page.get_context())
