"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (settings,
connection descriptors, DB wiring). Keep feature-specific SQL in the
corresponding feature package (e.g. `projects/`).
"""
