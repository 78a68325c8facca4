"""Shared plumbing for the contract endpoints: argument parsing, identity, error mapping."""

import json
import logging
from functools import wraps

from django.http import JsonResponse

from core.adapters.identity_adapter import IdentityAdapter
from core.exceptions import LedgerError, InvalidArgument
from core.services import invoke

log = logging.getLogger(__name__)


def contract_endpoint(method: str):
	"""
	Restrict a view to one HTTP method and render LedgerErrors as JSON error bodies
	"""
	def decorator(view):
		@wraps(view)
		def wrapper(request, *args, **kwargs):
			if request.method != method:
				return JsonResponse({"error": f"{method} only", "code": "METHOD_NOT_ALLOWED"}, status=405)
			try:
				return view(request, *args, **kwargs)
			except LedgerError as e:
				log.info("%s %s rejected with %s: %s", request.method, request.path, e.code, e)
				return JsonResponse(e.to_dict(), status=e.http_status)
		return wrapper
	return decorator


def call(request, operation: str, *args):
	"""
	Invoke `operation` as the identity carried by the request
	"""
	identity = IdentityAdapter.from_request(request)
	return invoke(identity, operation, *args)


def body_of(request) -> dict:
	try:
		body = json.loads(request.body or b"{}")
	except (ValueError, UnicodeDecodeError):
		raise InvalidArgument("invalid JSON body") from None
	if not isinstance(body, dict):
		raise InvalidArgument("JSON body must be an object")
	return body


def str_arg(data, name: str) -> str:
	value = data.get(name)
	if not isinstance(value, str) or not value:
		raise InvalidArgument(f"{name} required")
	return value


def int_arg(data, name: str) -> int:
	"""
	Accepts JSON integers and integer strings (query parameters arrive as strings)
	"""
	value = data.get(name)
	if value is None or isinstance(value, bool):
		raise InvalidArgument(f"{name} required")
	try:
		return int(str(value).strip())
	except ValueError:
		raise InvalidArgument(f"{name} must be an integer", {name: value}) from None
