"""URL routing for the contract API + the local host platform stub.


The /api/ namespace exposes one endpoint per contract operation; /stub/host/
exposes read-only views over the stubbed world state and event stream. In
production, the stub is replaced by the real host platform.
"""

from django.urls import path, include


urlpatterns = [
	path("api/", include("api.urls")),
	path("stub/host/", include("host_stub.urls")),
]
