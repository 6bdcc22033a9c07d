"""
Twin Reference Service - external id resolution for digital twin history

Resolves time-series property values that were reported against an
external identifier into the catalog entity and component that
currently own that identifier:
- Composite keys for entity property references
- Best-effort, three-call resolution pipeline with per-batch notices
- Least-privilege access policy for the dashboard's service role
"""

__version__ = "0.1.0"
