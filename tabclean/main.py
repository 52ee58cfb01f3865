import uvicorn
from fastapi import FastAPI
from tabclean.api.endpoints import router as endpoints_router
from tabclean.config import get_settings
from tabclean.logging_config import setup_logging

settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(title="Tabular Cleaning & Analysis Engine")
app.include_router(endpoints_router)

if __name__ == "__main__":
    uvicorn.run(
        "tabclean.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
