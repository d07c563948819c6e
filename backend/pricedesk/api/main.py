from contextlib import asynccontextmanager

from fastapi import FastAPI

from pricedesk.db import init_db

from pricedesk.api.routes.health import router as health_router
from pricedesk.api.routes.offers import router as offers_router
from pricedesk.api.routes.products import router as products_router


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Fail fast if DB unreachable + ensure table/view exist
    init_db()
    yield


app = FastAPI(title="pricedesk API", version="0.1.0", lifespan=lifespan)

app.include_router(health_router)
app.include_router(offers_router)
app.include_router(products_router)
