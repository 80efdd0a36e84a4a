# Role: FastAPI app bootstrap. Loads environment config early, registers routers, and exposes health/docs endpoints.

from fastapi import FastAPI

import order_bot.config
order_bot.config.load_env()

from order_bot.api.chat import router as chat_router
from order_bot.api.state import router as state_router

app = FastAPI(title="Order Bot API", version="0.1.0")
app.include_router(chat_router)
app.include_router(state_router)


@app.get("/")
def root() -> dict:
    # Role: quick discoverability for clients (where are docs/health).
    return {
        "message": "Order Bot API is running",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
