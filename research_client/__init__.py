"""Research Client - interactive chat client for a remote research assistant.

Keeps a bounded set of chat sessions on the client, submits queries and file
uploads to the backend, and turns every failure into a user-safe message.

Components:
    - models: Session, message and transport schemas
    - errors: Failure taxonomy and the error classifier
    - persistence: Durable slot for the session collection
    - sessions: Session store (capacity, eviction, current session)
    - api: HTTPX client for the research assistant backend
    - interaction: Query/upload orchestration
    - ui: NiceGUI chat interface
"""

__version__ = "0.1.0"
