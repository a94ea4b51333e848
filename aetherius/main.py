"""
ASGI entry point.

    uvicorn aetherius.main:app
"""

import uvicorn

from aetherius.api import create_app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("aetherius.main:app", host="0.0.0.0", port=8000)
