"""
Server-side proxy: holds the credential and forwards the news request to the model.

Run with `tech-news-proxy` or `uvicorn --factory tech_news.proxy:create_app`.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .client import NewsClient, build_client
from .config import Settings, load_settings
from .exceptions import ConfigurationError, TechNewsError, UpstreamRateLimit
from .core import describe_error, fetch_direct
from .models import NewsBatch

logger = logging.getLogger(__name__)


def _error(status: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": error, "message": message})


def create_app(
    settings: Optional[Settings] = None,
    *,
    client_factory: Optional[Callable[[Settings], NewsClient]] = None,
) -> FastAPI:
    settings = settings or load_settings()
    client_factory = client_factory or build_client

    app = FastAPI(title="tech-news proxy")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get(settings.proxy_path)
    def get_news():
        language = settings.language
        try:
            client = client_factory(settings)
            # Prompt-embedded format here; the direct path uses the strict schema
            items = fetch_direct(settings, client=client, strategy="prompt")
        except ConfigurationError as e:
            logger.error("Proxy misconfigured: %s", e)
            return _error(500, "Config Error", describe_error(e, language))
        except UpstreamRateLimit as e:
            logger.warning("Upstream rate limited: %s", e)
            return _error(429, "Rate Limited", describe_error(e, language))
        except TechNewsError as e:
            logger.exception("News request failed")
            return _error(500, "Server Error", describe_error(e, language))

        batch = NewsBatch(items=items, timestamp=datetime.now(timezone.utc).isoformat())
        logger.info("Serving %d news items", len(items))
        return batch.to_dict()

    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    uvicorn.run("tech_news.proxy:create_app", factory=True, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
