"""
Live event teardown.

Includes:
- teardown_domain: TeardownService, the entry point used by the API layer.
- teardown_models: request, per-dependent outcome and overall outcome models.
- teardown_errors: fatal error kinds raised while tearing down.
"""
