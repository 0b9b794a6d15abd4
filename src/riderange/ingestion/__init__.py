"""Ingestion layer.

Adapters that read ride records from storage and emit typed
:class:`riderange.models.RideEvent` objects in start-time order.
"""

__all__: list[str] = []
