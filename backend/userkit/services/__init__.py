"""Services Layer: async components that orchestrate IO around core types.

Invariants:
    - Services receive their storage handles via constructor injection
    - Every failure leaving a service is a UserKitError
"""
