"""
Domain layer containing core business logic and domain services.

Submodules:
- live: Live channel lifecycle logic (teardown of live events and their dependents).
"""
