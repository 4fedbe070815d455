from fastapi import APIRouter, Depends
from typing import Optional

from rokthona.api.dependencies import get_blog_service
from rokthona.api.guards import require_admin, require_admin_or_volunteer
from rokthona.api.schemas import BlogCreateRequest, BlogStatusRequest, MessageResponse
from rokthona.models.content import Blog, BlogStatus
from rokthona.models.user import Principal
from rokthona.services.blog_service import BlogService

router = APIRouter(prefix="/blogs", tags=["blogs"])


@router.post("", response_model=Blog)
def create_blog(
    body: BlogCreateRequest,
    principal: Principal = Depends(require_admin_or_volunteer),
    blogs: BlogService = Depends(get_blog_service),
):
    return blogs.create_blog(principal, body.model_dump())


@router.get("", response_model=list[Blog])
def list_blogs(status: Optional[BlogStatus] = None, blogs: BlogService = Depends(get_blog_service)):
    return blogs.list_blogs(status)


@router.get("/{blog_id}", response_model=Blog)
def get_blog(blog_id: str, blogs: BlogService = Depends(get_blog_service)):
    return blogs.get_blog(blog_id)


@router.patch("/{blog_id}/status", response_model=Blog)
def set_blog_status(
    blog_id: str,
    body: BlogStatusRequest,
    _: Principal = Depends(require_admin),
    blogs: BlogService = Depends(get_blog_service),
):
    return blogs.set_status(blog_id, body.status)


@router.delete("/{blog_id}", response_model=MessageResponse)
def delete_blog(
    blog_id: str,
    _: Principal = Depends(require_admin),
    blogs: BlogService = Depends(get_blog_service),
):
    blogs.delete_blog(blog_id)
    return MessageResponse(message="Blog deleted")
