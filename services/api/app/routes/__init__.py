"""Router package for the questions service.

Two routers are exported:

    from services.api.app.routes import api_router, questions_router

- `questions_router` serves the HTML pages and form submissions under
  `/questions`.
- `api_router` composes the JSON endpoints under `/api/v1` (see
  `services/api/app/routes/api_router.py`).
"""

from .api_router import router as api_router
from .questions import router as questions_router
