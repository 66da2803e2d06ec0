"""
CORE LAYER CONTRACT

This package contains the document model and its wire encoding.

RULES:
- Pure data structures and pure functions
- No network access, no shared mutable state
- Errors are raised as utils.exceptions.EncodingError / DecodingError

LAYER RESPONSIBILITY:
- Document, Product, Description, request envelope, response
- JSON / base64 encoding with the fixed YYYY-MM-DD date format

If you need HTTP or rate limiting, you are in the wrong layer.
"""
