from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from settings.config import settings
from db.db_operation import create_indexes, mongo_conn
from core.exceptions import (
    AppException,
    app_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from utils.logger import get_logger, setup_logging
from routes import auth, franchise_routes, order_route, user_routes

setup_logging(settings.LOG_LEVEL)
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await mongo_conn.connect()
    await create_indexes(mongo_conn.db)
    yield
    mongo_conn.close()


app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(auth.router)
app.include_router(user_routes.router)
app.include_router(order_route.router)
app.include_router(franchise_routes.router)


@app.get("/")
async def welcome():
    logger.info("Health check is successful")
    return {"message": "welcome to JWT Pizza", "version": settings.VERSION}


@app.get("/api/docs")
async def api_docs():
    return {
        "version": settings.VERSION,
        "endpoints": [*auth.docs, *user_routes.docs, *order_route.docs, *franchise_routes.docs],
        "config": {"factory": settings.FACTORY_URL, "db": settings.DB_NAME},
    }
