"""
Admission service for the Admission Layer.
"""

from typing import Any, Callable, Dict, List, Optional

from fastapi import HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import ValidationError
from .chain import GuardChain
from .directory import IdentityDirectory, InMemoryIdentityDirectory, load_directory
from .factory import build_chain
from .gateway import AdmissionGateway
from .guards.rate_limit import RATE_LIMIT_EXCEEDED, PerIdentityRateLimiter, RateLimiter


class AdmitRequest(BaseModel):
    """Request model for an admission check."""
    identity: str = Field(..., min_length=1, description="Identity key, e.g. an email address")
    credential: str = Field(..., description="Secret presented by the caller")


class AdmitResponse(BaseModel):
    """Response model for an admission check."""
    admitted: bool = Field(..., description="Whether the request was admitted")
    reason: str = Field("", description="Reason given by the rejecting guard")
    decided_by: Optional[str] = Field(None, description="Guard that ended the chain, if any")


class AdmissionService(BaseService):
    """Admission service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None,
                 directory: Optional[IdentityDirectory] = None,
                 chain: Optional[GuardChain] = None,
                 clock: Optional[Callable[[], float]] = None):
        super().__init__("admission", 8020, config=config)
        self.directory = directory if directory is not None else self._load_directory()
        chain = chain if chain is not None else build_chain(self.config, self.directory, clock=clock)
        self.gateway = AdmissionGateway(chain, metrics=self.metrics)
        self.logger.info(
            "Admission chain configured",
            guards=[guard.name for guard in chain],
            rate_limit=self.config.rate_limit,
            rate_limit_scope=self.config.rate_limit_scope
        )
        self._setup_admission_routes()

    def _load_directory(self) -> IdentityDirectory:
        if self.config.directory_file:
            directory = load_directory(self.config.directory_file)
            self.logger.info(
                "Identity directory loaded",
                path=self.config.directory_file,
                identities=len(directory)
            )
            return directory

        self.logger.warning("No identity directory file configured; starting with an empty directory")
        return InMemoryIdentityDirectory()

    def _find_rate_limiter(self):
        for guard in self.gateway.chain:
            if isinstance(guard, (RateLimiter, PerIdentityRateLimiter)):
                return guard
        raise HTTPException(status_code=404, detail="No rate limiter in the guard chain")

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"identity_directory": "ok"}

    def _setup_admission_routes(self):
        """Set up admission-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "admission",
                "message": "Admission Layer - Admission Service",
                "version": "1.0.0"
            }

        @self.app.post("/api/v1/admit", response_model=AdmitResponse)
        def admit(request: AdmitRequest):
            """Run credentials through the guard chain."""
            result = self.gateway.admit(request.identity, request.credential)
            body = AdmitResponse(
                admitted=result.admitted,
                reason=result.reason,
                decided_by=result.decided_by
            )
            if result.admitted:
                status_code = 200
            elif result.reason == RATE_LIMIT_EXCEEDED:
                status_code = 429
            else:
                status_code = 403
            return JSONResponse(status_code=status_code, content=body.model_dump())

        @self.app.get("/api/v1/chain")
        async def describe_chain() -> Dict[str, List[str]]:
            """List guards in evaluation order."""
            return {"guards": [guard.name for guard in self.gateway.chain]}

        @self.app.get("/api/v1/rate-limit")
        def rate_limit_status(identity: Optional[str] = Query(None)) -> Dict[str, Any]:
            """Current window usage of the chain's rate limiter."""
            limiter = self._find_rate_limiter()
            if isinstance(limiter, PerIdentityRateLimiter):
                if not identity:
                    raise ValidationError("identity is required for per-identity rate limits")
                return limiter.get_status(identity)
            return limiter.get_status()

        @self.app.post("/api/v1/rate-limit/reset")
        def reset_rate_limit(identity: Optional[str] = Query(None)) -> Dict[str, Any]:
            """Reset the chain's rate limiter."""
            limiter = self._find_rate_limiter()
            if isinstance(limiter, PerIdentityRateLimiter):
                limiter.reset(identity)
            else:
                limiter.reset()
            return {"reset": True, "identity": identity}


def create_app():
    """Create FastAPI application."""
    service = AdmissionService()
    return service.app


if __name__ == "__main__":
    service = AdmissionService()
    service.run()
