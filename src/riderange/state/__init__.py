"""State/store layer.

Holds the per-invocation range aggregates. Every merge goes through
:class:`riderange.state.store.AggregateStore`.
"""
