import logging
import uuid

from rokthona.core.errors import InvalidInput, NotFound
from rokthona.data_access.dynamodb import DynamoDataAccess
from rokthona.models.content import Blog
from rokthona.models.user import Principal

logger = logging.getLogger(__name__)


def _check_id(blog_id: str) -> None:
    try:
        uuid.UUID(blog_id)
    except ValueError:
        raise InvalidInput("Invalid blog ID")


class BlogService:
    def __init__(self, data_access: DynamoDataAccess):
        self.data_access = data_access

    def create_blog(self, author: Principal, content: dict) -> dict:
        blog = Blog(**content, author_email=author.email)
        return self.data_access.create_blog(blog)

    def list_blogs(self, status: str | None = None) -> list[dict]:
        return self.data_access.list_blogs(status)

    def get_blog(self, blog_id: str) -> dict:
        _check_id(blog_id)
        blog = self.data_access.get_blog(blog_id)
        if blog is None:
            raise NotFound("Blog not found")
        return blog

    def set_status(self, blog_id: str, status: str) -> dict:
        _check_id(blog_id)
        logger.info(f"Updating blog status: {blog_id} to {status}")
        updated = self.data_access.update_blog_status(blog_id, status)
        if updated is None:
            raise NotFound("Blog not found")
        return updated

    def delete_blog(self, blog_id: str) -> None:
        _check_id(blog_id)
        if not self.data_access.delete_blog(blog_id):
            raise NotFound("Blog not found")
        logger.info(f"Deleted blog {blog_id}")
