"""
Business logic for accounts, short URLs, redirects and click analytics.

Each service wraps one AsyncSession and raises ShortenerError subclasses for
expected failures; the API layer only shapes their results.
"""
