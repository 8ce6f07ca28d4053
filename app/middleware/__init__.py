"""HTTP middleware: request ID propagation.

Applied in main app. Import and use from app.main.
"""

from app.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
