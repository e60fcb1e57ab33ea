"""FastAPI application entry point"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Setup logging
from invoice_creator.logging_config import setup_logging
setup_logging()

load_dotenv()

from invoice_creator import __version__
from invoice_creator.config import settings
from invoice_creator.utils.errors import ValidationError, ChannelUnavailableError
from api.state import get_app_state

app = FastAPI(
    title="Invoice Creator API",
    description="Invoices and quotes for a mobile mechanic",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "field": exc.field},
    )


@app.exception_handler(ChannelUnavailableError)
async def _channel_unavailable_handler(request: Request, exc: ChannelUnavailableError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "channel": exc.channel},
    )


@app.on_event("startup")
async def _init_state() -> None:
    """Ensure the store table exists, then load persisted collections"""
    from invoice_creator.models.database import init_db

    state = get_app_state()
    await init_db(state.db_engine)
    await state.load()


@app.on_event("shutdown")
async def _close_state() -> None:
    get_app_state().close()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Invoice Creator API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


# Import routes
from api.routes import document, contacts, parts, export, send, history, presentation
app.include_router(document.router, prefix="/api", tags=["document"])
app.include_router(contacts.router, prefix="/api", tags=["contacts"])
app.include_router(parts.router, prefix="/api", tags=["parts"])
app.include_router(export.router, prefix="/api", tags=["export"])
app.include_router(send.router, prefix="/api", tags=["send"])
app.include_router(history.router, prefix="/api", tags=["history"])
app.include_router(presentation.router, prefix="/api", tags=["presentation"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
