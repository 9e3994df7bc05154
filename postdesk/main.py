import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from postdesk.repos.posts_repo import FilesystemPostsRepo
from postdesk.routers import images, lint, posts
from postdesk.security import get_api_key
from postdesk.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    docs = FilesystemPostsRepo(settings.CONTENT_DIR).list_blog_docs()
    logger.info(f"Serving {len(docs)} post(s) from {settings.CONTENT_DIR}")
    if not settings.POSTDESK_API_KEY:
        logger.warning("POSTDESK_API_KEY is not set, protected routes will refuse every request")
    yield


app = FastAPI(
    title="postdesk API",
    description="Front-matter aware content service for MDX blog posts",
    lifespan=lifespan,
)

app.include_router(images.router)
app.include_router(posts.router, dependencies=[Depends(get_api_key)])
app.include_router(lint.router, dependencies=[Depends(get_api_key)])


@app.get("/")
async def root():
    return {"message": "postdesk API is running"}
