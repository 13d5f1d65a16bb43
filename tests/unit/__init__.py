"""Unit tests for individual components in isolation.

Ensures fast execution with no network and no backend.

Coverage:
    - errors/: Failure classification and message sanitizing
    - persistence/: Session serialization and storage slots
    - sessions/: Capacity, eviction and the current-session pointer
    - interaction/: Submission flow with a fake transport
    - config: Environment loading and validation
"""
