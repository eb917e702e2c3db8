from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import Settings
from .db import init_db, make_engine, make_session_factory
from .errors import SurvivalError, malformed_parameter, missing_parameter
from .logging_middleware import install_request_logging
from .api.v1 import api_router as api_v1_router


def _param_name(loc) -> str:
    # ("body", "name") -> "name"
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts) or ".".join(str(p) for p in loc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    engine = make_engine(settings)
    init_db(engine)

    app = FastAPI(
        title="Survival API",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    install_request_logging(app, settings)

    @app.exception_handler(SurvivalError)
    async def _survival_error_handler(request: Request, exc: SurvivalError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def _validation_error_handler(request: Request, exc: RequestValidationError):
        errs = exc.errors()
        first = errs[0] if errs else {"type": "", "loc": ()}
        name = _param_name(first.get("loc", ()))
        if first.get("type") == "missing":
            err = missing_parameter(name)
        else:
            err = malformed_parameter(name)
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    # ▼ API ルーター
    app.include_router(api_v1_router, prefix="/api")

    @app.get("/")
    def read_root():
        return {"message": "Survival API is running"}

    return app


# 起動: uvicorn --factory survival.main:create_app
