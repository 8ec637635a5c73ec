"""
Live channel domain logic.

Includes:
- teardown: Ordered decommissioning of a live event, its outputs, assets and policies.
"""
