"""In-process tables standing in for the host platform's world state.

The contract never touches these models directly; it goes through
core.adapters.state_adapter.StateAdapter, like a chaincode goes through its stub.
"""

from django.db import models


class WorldState(models.Model):
	"""
	Single key -> value record of the shared ledger state
	"""
	key = models.CharField(max_length=512, unique=True)
	value = models.BinaryField()
	updated_tx = models.CharField(max_length=64, blank=True, default="")
	updated_at = models.DateTimeField(auto_now=True)


class KeyEndorsement(models.Model):
	"""
	Organizations required to co-sign future updates of one world state key
	"""
	key = models.CharField(max_length=512, unique=True)
	organizations = models.JSONField(default=list)


class PrivateData(models.Model):
	"""
	Per-organization private collection entry (only its hash is shared with other orgs)
	"""
	collection = models.CharField(max_length=128)
	key = models.CharField(max_length=512)
	value = models.BinaryField()
	value_hash = models.CharField(max_length=64)

	class Meta:
		unique_together = (("collection", "key"),)


class ChaincodeEvent(models.Model):
	"""
	Append-only log of events emitted by contract invocations
	"""
	id = models.BigAutoField(primary_key=True)
	tx_id = models.CharField(max_length=64, db_index=True)
	name = models.CharField(max_length=64)
	payload = models.JSONField(default=dict)
	created_at = models.DateTimeField(auto_now_add=True)
