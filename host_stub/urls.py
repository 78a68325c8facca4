from django.urls import path
from .views import state, events


urlpatterns = [
	path("state", state),
	path("events", events),
]
