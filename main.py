"""
Energy-Aware Placement Optimizer - Main Application Entry Point

This module initializes the FastAPI application with observability through
Logfire, sets up middleware, and mounts the placement API. Run it directly to
serve the API, or with ``optimize`` to place the reference datacenter (or a
scenario file) from the command line.
"""

import argparse
import time
import traceback
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv
import logfire

# Load environment variables
load_dotenv()

from src.core.config import settings
from src.api.v1 import placement

# Configure Logfire for observability
logfire.configure(**settings.get_logfire_settings())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle events.
    """
    logfire.info(
        "Application starting up",
        environment=settings.environment,
        version=settings.app_version
    )

    yield

    logfire.info("Application shutting down")


# Create FastAPI application instance
app = FastAPI(
    title=settings.app_name,
    description=(
        "Genetic algorithm placement of virtual machines onto physical hosts, "
        "minimizing overload, wasted capacity, powered-on hosts and communication cost"
    ),
    version=settings.app_version,
    docs_url=settings.api_docs_url,
    redoc_url=settings.api_redoc_url,
    openapi_url=settings.api_openapi_url,
    lifespan=lifespan
)

# Enable Logfire instrumentation
logfire.instrument_fastapi(app, capture_headers=True)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Process-Time", "X-Request-ID"]
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """
    Add processing time header and request tracking.
    """
    request_id = str(uuid.uuid4())
    start_time = time.time()

    with logfire.span(
        "HTTP Request",
        request_id=request_id,
        method=request.method,
        path=request.url.path
    ):
        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id

        logfire.info(
            "Request completed",
            request_id=request_id,
            status_code=response.status_code,
            process_time=process_time
        )

        return response


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """
    Handle HTTP exceptions with proper logging.
    """
    logfire.error(
        "HTTP Exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
            "timestamp": _timestamp()
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected exceptions with proper error logging.
    """
    logfire.error(
        "Unhandled Exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        traceback=traceback.format_exc()
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "status_code": 500,
            "timestamp": _timestamp()
        }
    )


@app.get("/", tags=["Health"])
async def root() -> Dict[str, Any]:
    """
    Root endpoint providing basic API information.
    """
    return {
        "message": "Energy-Aware Placement Optimizer API",
        "status": "operational",
        "version": settings.app_version,
        "docs": settings.api_docs_url,
        "health": "/health"
    }


@app.get("/health", tags=["Health"])
async def health_check() -> Dict[str, Any]:
    """
    Health check endpoint.
    """
    with logfire.span("Health check"):
        health_status = {
            "status": "healthy",
            "timestamp": _timestamp(),
            "service": settings.logfire_service_name,
            "environment": settings.environment,
            "version": settings.app_version,
            "checks": {
                "api": "operational",
                "genetic_algorithm": "operational"
            }
        }
        logfire.info("Health check passed")
        return health_status


app.include_router(
    placement.router,
    prefix=f"{settings.api_v1_prefix}/placement",
    tags=["Placement"]
)


def run_optimization(
    scenario_path: Optional[str] = None,
    config_path: Optional[str] = None,
    seed: Optional[int] = None
) -> str:
    """Place a scenario (the reference datacenter by default) and return the report."""
    from src.placement.core.config import PlacementConfig, create_default_config
    from src.placement.core.engine import optimize_placement
    from src.placement.scenarios import create_reference_datacenter, load_scenario

    if scenario_path:
        units, nodes = load_scenario(scenario_path)
    else:
        units, nodes = create_reference_datacenter()

    config = PlacementConfig.load(config_path) if config_path else create_default_config()
    if seed is not None:
        config.random_seed = seed

    result = optimize_placement(units, nodes, config)
    return result.format_report()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description=settings.app_name)
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Run the HTTP API (default)")

    optimize_parser = subparsers.add_parser("optimize", help="Optimize a placement and print it")
    optimize_parser.add_argument("--scenario", help="Scenario JSON file (default: reference datacenter)")
    optimize_parser.add_argument("--config", help="PlacementConfig JSON file")
    optimize_parser.add_argument("--seed", type=int, help="Random seed")

    args = parser.parse_args(argv)

    if args.command == "optimize":
        print(run_optimization(args.scenario, args.config, args.seed))
        return

    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info"
    )


if __name__ == "__main__":
    main()
