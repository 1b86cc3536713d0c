import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from legalese.api.routes import router
from legalese.config import get_settings
from legalese.knowledge_base import get_knowledge_base

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Legalese")

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.on_event("startup")
def _log_knowledge_base():
    kb = get_knowledge_base()
    logger.info(
        "Legalese started: knowledge base loaded with %d contract types, %d legal terms, %d red flags",
        len(kb.contract_types), len(kb.legal_terms), len(kb.red_flags),
    )
