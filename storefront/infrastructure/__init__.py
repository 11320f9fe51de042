"""Infrastructure layer module.

Configuration, logging, the catalog API client and the URL store.
"""
