"""Query and upload orchestration.

Connects UI actions to the backend and the session store:
    - Creates a session on demand before the first query
    - Appends the user's message optimistically, then the reply or the failure
    - Classifies every failure and reports it through the notifier
    - Allows a single submission in flight per orchestrator
"""

from research_client.interaction.orchestrator import (
    InteractionOrchestrator,
    Notifier,
    ResearchTransport,
    Submission,
    SubmissionKind,
    preview_text,
)

__all__ = [
    "InteractionOrchestrator",
    "Notifier",
    "ResearchTransport",
    "Submission",
    "SubmissionKind",
    "preview_text",
]
