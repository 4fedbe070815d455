import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from rokthona.api.exception_handlers import register_exception_handlers
from rokthona.api.routers import router
from rokthona.core.logging_config import configure_logging

configure_logging(os.getenv("LOG_LEVEL", "INFO"))

app = FastAPI(
    title="Rokthona API",
    root_path=os.getenv("API_ROOT_PATH", "")
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ALLOW_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

@app.get("/")
def read_root():
    return {"message": "RokthoNa API is running"}


app.include_router(router)

handler = Mangum(app)
