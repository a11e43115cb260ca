import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from clearbudget.api.routes import router
from clearbudget.config import get_settings

settings = get_settings()

logger.remove()
logger.add(sys.stderr, level=settings.log_level, format="{time:HH:mm:ss} | {level:<7} | {message}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the Telegram bot for as long as the API is up, when a token is configured."""
    bot_app = None
    if settings.telegram_bot_token:
        from clearbudget.bot.handler import build_bot_app

        bot_app = build_bot_app()
        await bot_app.initialize()
        await bot_app.start()
        await bot_app.updater.start_polling(drop_pending_updates=True)
        logger.info("Telegram bot started (polling)")
    else:
        logger.warning("TELEGRAM_BOT_TOKEN not set — chat is available over HTTP only")

    if not settings.gemini_api_key and not settings.openrouter_api_key:
        logger.warning("No model API key configured — parsing and advice are rule-based only")

    yield

    if bot_app is not None:
        await bot_app.updater.stop()
        await bot_app.stop()
        await bot_app.shutdown()
        logger.info("Telegram bot stopped")


app = FastAPI(title=settings.product_name, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("{} {}", request.method, request.url.path)
    response: Response = await call_next(request)
    logger.info("→ {}", response.status_code)
    return response


app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
