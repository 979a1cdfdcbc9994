"""FastAPI application and startup."""

import uvicorn
from fastapi import FastAPI

from smartaction.adapters.web.action_routes import actions_router, refine_router
from smartaction.config import AppConfig, __version__

app = FastAPI(title="Smart Action Server", version=__version__)
app.include_router(actions_router)
app.include_router(refine_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


def main():
    config = AppConfig.from_env()
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
