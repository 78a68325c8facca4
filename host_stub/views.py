"""HTTP endpoints for the host stub mirroring what a peer's query tooling exposes.

Read-only: every mutation goes through a contract invocation (/api/*).
"""

from django.http import JsonResponse, HttpResponseBadRequest
from .models import WorldState, ChaincodeEvent, KeyEndorsement


def state(request):
	"""
	GET: Raw world state value for ?key=... (composite keys use the \\x1f separator)
	"""
	key = request.GET.get("key")
	if not key:
		return HttpResponseBadRequest("key required")
	row = WorldState.objects.filter(key=key).first()
	if row is None:
		return JsonResponse({"key": key, "value": None}, status=404)
	endorsement = KeyEndorsement.objects.filter(key=key).first()
	return JsonResponse({
		"key": key,
		"value": bytes(row.value).decode("utf-8"),
		"updated_tx": row.updated_tx,
		"endorsing_organizations": endorsement.organizations if endorsement else [],
	})


def events(request):
	"""
	GET: Most recent emitted events, optionally filtered by ?name= or ?tx_id=
	"""
	qs = ChaincodeEvent.objects.order_by("-id")
	if request.GET.get("name"):
		qs = qs.filter(name=request.GET["name"])
	if request.GET.get("tx_id"):
		qs = qs.filter(tx_id=request.GET["tx_id"])
	data = [
		{
			"tx_id": e.tx_id,
			"name": e.name,
			"payload": e.payload,
			"created_at": e.created_at.isoformat(),
		}
		for e in qs[:50]
	]
	return JsonResponse(data, safe=False)
