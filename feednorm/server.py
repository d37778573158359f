import logging
import time

from fastapi import FastAPI, Request, Query
from fastapi.responses import JSONResponse

from feednorm.api import PARSE_ERRORS, parse_string, parse_url
from feednorm.config import load_config, AppConfig, ParserOptions
from feednorm.logging import setup_logging
from feednorm.rss.fetch import FetchError, UnsupportedSchemeError


app = FastAPI()
config: AppConfig = None
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def on_startup() -> None:
    global config
    config = load_config()
    setup_logging(config.log_dir, config.log_level)
    logger.info("Feed normalization service starting up")


def _options() -> ParserOptions:
    if config is None:
        return ParserOptions()
    return config.parser


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "timestamp": int(time.time())}


@app.post("/parse")
async def parse_posted_feed(request: Request) -> JSONResponse:
    """Normalize a feed document sent as the request body"""
    body = await request.body()
    logger.info("Parse request: %d bytes, type=%s", len(body), request.headers.get("content-type", ""))

    try:
        feed = parse_string(body, _options())
    except PARSE_ERRORS as exc:
        logger.warning("Feed parsing failed: %s", exc)
        return JSONResponse({"detail": str(exc)}, status_code=422)

    return JSONResponse(feed.to_dict())


@app.get("/parse")
def parse_remote_feed(url: str = Query(...)) -> JSONResponse:
    """Fetch a feed by URL and normalize it"""
    try:
        feed = parse_url(url, _options())
    except FetchError as exc:
        logger.warning("Fetching %s failed: %s", url, exc)
        return JSONResponse({"detail": str(exc)}, status_code=502)
    except PARSE_ERRORS as exc:
        logger.warning("Feed parsing failed for %s: %s", url, exc)
        return JSONResponse({"detail": str(exc)}, status_code=422)
    except UnsupportedSchemeError as exc:
        return JSONResponse({"detail": str(exc)}, status_code=400)

    return JSONResponse(feed.to_dict())
