from fastapi import FastAPI

from loungedb import __version__
from loungedb.api.routers.airports import router as airports_router

# Run with: uvicorn loungedb.main:app --port 3000
app = FastAPI(title="Airport Lounge Search API", version=__version__)

app.include_router(airports_router)
