import os

import uvicorn

from api import app


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.environ.get("AUTHORING_HOST", "127.0.0.1"),
        port=int(os.environ.get("AUTHORING_PORT", "8000")),
    )
