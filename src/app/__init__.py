"""Order service.

Validated create, list, lookup, update and delete of customer orders,
stored in a single relational table and served over HTTP with FastAPI.
"""

__version__ = "0.1.0"
