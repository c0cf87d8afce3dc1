import sys

from loguru import logger

from smgview.api import create_app
from smgview.config import settings
from smgview.session import GraphSession

logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

session = GraphSession()
if settings.graph_path.exists():
    logger.info(f"Loading graph from {settings.graph_path}")
    session.open_file(settings.graph_path)
else:
    logger.info(f"No graph at {settings.graph_path}; waiting for an upload")

app = create_app(session=session)
