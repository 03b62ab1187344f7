"""
Services Package

Business logic kept separate from HTTP handling (routers):
- catalog.py: create/read/update/delete for authors, categories and books
- references.py: keeps Author/Category <-> Book relationships consistent
- normalizer.py: lenient parsing of the categories field of book writes
- uploads.py: cover image storage on the local filesystem
- rate_limiter.py: rate limiting with slowapi
"""
