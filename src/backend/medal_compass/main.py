# medal_compass/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from medal_compass import __version__
from medal_compass.core.config import get_settings
from medal_compass.core.exceptions import LowAccuracyError, MedalCompassError
from medal_compass.routers import collections, medals, reports
from medal_compass.utils.logger import logger, setup_logging

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, to_file=settings.LOG_TO_FILE, file_path=settings.LOG_FILE_PATH)
    logger.info(f"Medal Compass API v{__version__} started")
    yield
    logger.info("Medal Compass API stopped")

app = FastAPI(title="Medal Compass API", version=__version__, lifespan=lifespan)

app.include_router(medals.router)
app.include_router(reports.router)
app.include_router(collections.router)

@app.exception_handler(MedalCompassError)
async def handle_medal_compass_error(request: Request, exc: MedalCompassError):
    """
    ドメイン例外をHTTPレスポンスに変換する．detailはそのまま画面に表示できる文言．
    """
    content = {"detail": exc.message}
    if isinstance(exc, LowAccuracyError):
        content["accuracy"] = exc.accuracy
        content["threshold"] = exc.threshold
    return JSONResponse(status_code=exc.status_code, content=content)

@app.get("/")
def read_root():
    return {"message": "Welcome to Medal Compass API!"}
