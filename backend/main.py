import logging

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from config import get_settings
from routers import books, consult

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose preflight answers carry headers only, no body."""

    def preflight_response(self, request_headers):
        response = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=response.status_code, headers=headers)


app = FastAPI(
    title="Archivist",
    description="Recommends one book for a synopsis, quote or mood, with cover art and ratings.",
    version="1.0.0",
)

app.add_middleware(
    EmptyPreflightCORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=settings.allowed_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(consult.router)
app.include_router(books.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
