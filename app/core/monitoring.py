# Mini Marketplace Monitoring Configuration
# Prometheus metrics, health checks, and logging setup

import logging
import logging.handlers
import os
import time
from datetime import datetime, timezone
from fastapi import FastAPI, Request, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .config import settings

# Metrics
request_count = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
request_duration = Histogram('http_request_duration_seconds', 'HTTP request duration', ['method', 'endpoint'])

# Backend metrics
backend_call_count = Counter('backend_calls_total', 'Total backend calls', ['area', 'operation', 'outcome'])

logger = logging.getLogger(__name__)

def setup_logging():
    """Configure application logging"""

    log_level = os.getenv("LOG_LEVEL", settings.LOG_LEVEL)
    log_file = os.getenv("LOG_FILE")

    # Configure logging format
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    # File handler with rotation, only when a log file is configured
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=int(os.getenv("LOG_MAX_SIZE", "10MB").replace("MB", "")) * 1024 * 1024,
            backupCount=int(os.getenv("LOG_BACKUP_COUNT", "5"))
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=handlers
    )

    # Silence noisy loggers in production
    if settings.ENVIRONMENT == "production":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

def setup_monitoring_middleware(app: FastAPI):
    """Add monitoring middleware to track metrics"""

    @app.middleware("http")
    async def monitor_requests(request: Request, call_next):
        start_time = time.time()

        # Process request
        response = await call_next(request)

        # Calculate metrics
        process_time = time.time() - start_time

        # Update metrics
        request_count.labels(
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code
        ).inc()

        request_duration.labels(
            method=request.method,
            endpoint=request.url.path
        ).observe(process_time)

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({process_time * 1000:.1f}ms)"
        )

        # Add response headers
        response.headers["X-Process-Time"] = str(process_time)

        return response

def setup_health_endpoints(app: FastAPI):
    """Setup health check endpoints"""

    @app.get("/health")
    async def health_check():
        """Basic health check endpoint"""
        return {
            "status": "healthy",
            "version": settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint"""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

def record_backend_call(area: str, operation: str, success: bool = True):
    """Count a call made to the backend service"""
    backend_call_count.labels(
        area=area,
        operation=operation,
        outcome="ok" if success else "error"
    ).inc()
