"""Adapter over the host platform's client identity.

In production, the peer derives the caller from its verified certificate. Here
the gateway in front of the API forwards the already-verified principal id and
organization as request headers.
"""

from django.conf import settings

from core.context import ClientIdentity
from core.exceptions import PermissionDenied


class IdentityAdapter:
	"""
	Builds the ClientIdentity of the current invocation
	"""

	@staticmethod
	def from_request(request) -> ClientIdentity:
		id_header = getattr(settings, "IDENTITY_ID_HEADER", "X-Client-Id")
		msp_header = getattr(settings, "IDENTITY_MSPID_HEADER", "X-Client-Mspid")
		client_id = (request.headers.get(id_header) or "").strip()
		msp_id = (request.headers.get(msp_header) or "").strip()
		if not client_id or not msp_id:
			raise PermissionDenied("missing client identity", {"headers": f"{id_header}, {msp_header}"})
		return ClientIdentity(id=client_id, msp_id=msp_id)
