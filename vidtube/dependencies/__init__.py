"""FastAPI dependencies: authentication, service wiring, ownership checks."""
