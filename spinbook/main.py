import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from spinbook.api.bookings import router as bookings_router
from spinbook.api.config_check import router as config_check_router
from spinbook.api.errors import register_exception_handlers
from spinbook.core.config import settings


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("date", "booking_id", "event_id", "slots", "code", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="SpinBook", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)
register_exception_handlers(app)

app.include_router(bookings_router, prefix="/api", tags=["bookings"])
app.include_router(config_check_router, prefix="/api", tags=["config"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
