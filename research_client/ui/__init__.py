"""NiceGUI interface - thin presentation layer for the research client.

Responsibilities:
    - Session list with create, select and delete
    - Chat transcript display with a pending indicator while busy
    - File upload control and provider/model selection
    - Toast notifications

Contains no business logic. Delegates every action to the session store
and the interaction orchestrator.
"""
