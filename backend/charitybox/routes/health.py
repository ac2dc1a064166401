from fastapi import APIRouter, Request

from charitybox.core.clock import utcnow
from charitybox.database import database_status, database_type

router = APIRouter(tags=["Health"])


@router.get("/health")
def health(request: Request):
    settings = request.app.state.settings
    engine = request.app.state.engine
    return {
        "status": "OK",
        "app": settings.APP_NAME,
        "timestamp": utcnow().isoformat(),
        "database": {
            "status": database_status(engine),
            "type": database_type(engine),
        },
        "server": {
            "port": settings.PORT,
            "environment": settings.ENVIRONMENT,
        },
    }
