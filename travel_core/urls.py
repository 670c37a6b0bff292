from django.urls import path, include

urlpatterns = [
    # All pages live in the 'travel' app, mounted at the root path ('')
    path('', include('travel.urls')),
]
