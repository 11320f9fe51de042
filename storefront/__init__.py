"""Storefront catalog browsing.

Keeps a shopper's catalog selection (category, price, size, color, brand,
sort, page) in sync with the page URL and with the remote catalog API.

This package provides:
- FilterState and catalog models (domain)
- URL query string codec with lenient legacy decoding (querystring)
- Backend query builder with the random-sampling policy, fetch orchestration
  with generation-based staleness, and the filter editor (application)
- Catalog HTTP client, settings and logging (infrastructure)
- Backend-for-frontend HTTP API (api)
"""

__version__ = "0.1.0"
