"""API subpackage - FastAPI service."""
