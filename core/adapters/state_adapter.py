"""Adapter over the host platform's world state (stubbed by host_stub).

In production, this would be the chaincode stub handed over by the peer: reads
and writes are collected into the transaction's read/write set and committed
(or not) by ordering. Here we read and write host_stub tables inside the
invocation's database transaction, which gives the same all-or-nothing commit.
"""

import hashlib
from typing import Iterable, List, Optional

from host_stub.models import WorldState, KeyEndorsement, PrivateData, ChaincodeEvent
from core.constants import COMPOSITE_KEY_SEP
from core.exceptions import InvalidArgument, NotFound


class StateAdapter:
	"""
	Key/value access for one invocation, plus events, key endorsement and private data.
	tx_id tags every write and event so the host can trace them back to the call.
	"""

	def __init__(self, tx_id: str):
		self.tx_id = tx_id

	# --- World state --------------------------------------------------------

	def get_state(self, key: str) -> Optional[bytes]:
		row = WorldState.objects.select_for_update().filter(key=key).first()
		return bytes(row.value) if row else None

	def put_state(self, key: str, value: bytes) -> None:
		if not key:
			raise InvalidArgument("key must not be empty")
		WorldState.objects.update_or_create(key=key, defaults={"value": value, "updated_tx": self.tx_id})

	def del_state(self, key: str) -> None:
		"""
		Delete a record; its key-level endorsement policy goes with it.
		"""
		WorldState.objects.filter(key=key).delete()
		KeyEndorsement.objects.filter(key=key).delete()

	def get_int(self, key: str) -> Optional[int]:
		"""
		Read an integer record (balances, holds, allowances, supply). A record of
		another kind under the key is reported as NotFound.
		"""
		raw = self.get_state(key)
		if raw is None:
			return None
		try:
			return int(raw.decode("utf-8"))
		except ValueError:
			raise NotFound(f"record {key} is not an account", {"key": key}) from None

	def put_int(self, key: str, value: int) -> None:
		self.put_state(key, str(int(value)).encode("utf-8"))

	@staticmethod
	def create_composite_key(prefix: str, segments: Iterable[str]) -> str:
		"""
		Join a category prefix and ordered segments into one key: SEP prefix SEP seg SEP ...
		"""
		parts = [prefix, *segments]
		for part in parts:
			if COMPOSITE_KEY_SEP in part:
				raise InvalidArgument("composite key segment contains the reserved separator", {"segment": part})
		return COMPOSITE_KEY_SEP + "".join(p + COMPOSITE_KEY_SEP for p in parts)

	# --- Events ---------------------------------------------------------------

	def set_event(self, name: str, payload: dict) -> None:
		ChaincodeEvent.objects.create(tx_id=self.tx_id, name=name, payload=payload)

	# --- Key-level endorsement -------------------------------------------------

	def get_endorsement_orgs(self, key: str) -> List[str]:
		row = KeyEndorsement.objects.filter(key=key).first()
		return list(row.organizations) if row else []

	def set_endorsement_orgs(self, key: str, organizations: List[str]) -> None:
		KeyEndorsement.objects.update_or_create(key=key, defaults={"organizations": list(organizations)})

	# --- Private data -------------------------------------------------------------

	def put_private_data(self, collection: str, key: str, value: bytes) -> None:
		PrivateData.objects.update_or_create(
			collection=collection,
			key=key,
			defaults={"value": value, "value_hash": hashlib.sha256(value).hexdigest()},
		)

	def get_private_data(self, collection: str, key: str) -> Optional[bytes]:
		"""
		Plaintext is only readable on a peer of the collection's organization.
		"""
		row = PrivateData.objects.filter(collection=collection, key=key).first()
		return bytes(row.value) if row else None

	def get_private_data_hash(self, collection: str, key: str) -> Optional[str]:
		row = PrivateData.objects.filter(collection=collection, key=key).only("value_hash").first()
		return row.value_hash if row else None
