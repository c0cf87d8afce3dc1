from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smgview.api.endpoints import get_endpoints_router
from smgview.session import GraphSession


def create_app(*, session: GraphSession) -> FastAPI:
    """Create FastAPI app."""
    app = FastAPI()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router=get_endpoints_router(session=session))

    return app
