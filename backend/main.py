import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import (
    invoices_router,
    order_forms_router,
    purchase_orders_router,
    totals_router,
)
from config import settings
from errors import (
    CustomerNotFound,
    DocumentNotFound,
    DuplicateNumber,
    InvalidInput,
    SequenceUnavailable,
)

logger = logging.getLogger("billing-backend")

if settings.allowed_origins == ["*"]:
    allow_origins = ["*"]
else:
    allow_origins = settings.allowed_origins


@asynccontextmanager
async def lifespan(app: FastAPI):
    if allow_origins == ["*"]:
        logger.warning(
            "CORS is set to allow all origins with credentials; set ALLOWED_ORIGINS to explicit values for production."
        )
    yield


app = FastAPI(title="Billing API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(order_forms_router)
app.include_router(invoices_router)
app.include_router(purchase_orders_router)
app.include_router(totals_router)


@app.exception_handler(InvalidInput)
async def _invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)}
    )


@app.exception_handler(CustomerNotFound)
async def _customer_not_found(request: Request, exc: CustomerNotFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
    )


@app.exception_handler(DocumentNotFound)
async def _document_not_found(request: Request, exc: DocumentNotFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
    )


@app.exception_handler(DuplicateNumber)
async def _duplicate_number(request: Request, exc: DuplicateNumber) -> JSONResponse:
    logger.warning("Duplicate document number on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "Document number already exists. Please try again."},
    )


@app.exception_handler(SequenceUnavailable)
async def _sequence_unavailable(
    request: Request, exc: SequenceUnavailable
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": "Could not allocate a document number. Please retry.",
            "outcome_unknown": exc.outcome_unknown,
        },
    )


@app.middleware("http")
async def log_preflight(request, call_next):
    if request.method == "OPTIONS":
        origin = request.headers.get("origin", "")
        logger.info("CORS preflight %s %s origin=%s", request.method, request.url.path, origin)
    response = await call_next(request)
    return response


@app.get("/api/health")
async def health():
    return {"status": "ok"}
