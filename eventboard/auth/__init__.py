"""Authentication: password hashing, session tokens and FastAPI dependencies."""
