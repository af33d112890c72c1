"""API Schemas — Pydantic request bodies, one module per resource."""
