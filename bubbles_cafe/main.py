"""ASGI entry point.

Serve with ``uvicorn bubbles_cafe.main:app``, or run this module directly for
a local development server.
"""

import uvicorn

from bubbles_cafe.core.application import create_application
from bubbles_cafe.core.config.settings import settings
from bubbles_cafe.core.initialization import initialize_application

initialize_application()

app = create_application()


if __name__ == "__main__":
    uvicorn.run("bubbles_cafe.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
