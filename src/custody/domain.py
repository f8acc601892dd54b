"""Custody bounded context: role-gated custody of goods between parties.

Tracks items an owner registers, the contract the supplier signs, and the
shipments couriers carry until the owner receives them. Uses CQRS: a single
Contract aggregate is the consistency boundary for items, shipments and the
courier ledger.
"""

from protean.domain import Domain

custody = Domain(name="custody")
