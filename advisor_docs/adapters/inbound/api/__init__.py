"""HTTP API for document upload, search and context assembly."""
