from fastapi import FastAPI

from cashfree_gateway.config import get_settings
from cashfree_gateway.logging_config import configure_logging
from cashfree_gateway.routes import router

configure_logging(get_settings().log_level)

app = FastAPI(title="Cashfree Payment Function")

app.include_router(router)
