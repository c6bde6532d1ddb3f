"""Tasks vertical — the task resource end to end.

- SQLAlchemy model with a store-assigned id and created_at
- Async repository and service for the five CRUD operations
- FastAPI router for /tasks
- httpx client, derived view state and the edit-form state machine
- Dataclass configuration
"""
