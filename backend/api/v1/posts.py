"""Post endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from api.deps import CurrentUser, get_current_user, get_post_service, require_super_admin
from services import PostService
from .envelope import Envelope, envelope

router = APIRouter(prefix="/posts", tags=["posts"])


class PostWriteRequest(BaseModel):
    title: str
    description: str

    @field_validator("title", "description")
    @classmethod
    def _reject_whitespace_only(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Envelope)
async def create_post(
    payload: PostWriteRequest,
    service: PostService = Depends(get_post_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> JSONResponse:
    post = await service.create_post(current_user.id, payload.title, payload.description)
    return envelope(status.HTTP_201_CREATED, "New post created succesfully", data=post)


@router.delete("/admin/{post_id}", response_model=Envelope)
async def delete_post_as_admin(
    post_id: str,
    service: PostService = Depends(get_post_service),
    _: CurrentUser = Depends(require_super_admin),
) -> JSONResponse:
    await service.delete_post_privileged(post_id)
    return envelope(status.HTTP_200_OK, "Post deleted")


@router.get("/own", response_model=Envelope)
async def list_own_posts(
    service: PostService = Depends(get_post_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> JSONResponse:
    posts = await service.list_own_posts(current_user.id)
    if not posts:
        return envelope(status.HTTP_200_OK, "You haven't created any posts yet", data=[])
    return envelope(status.HTTP_200_OK, "Your posts retrieved", data=posts)


@router.get("/following", response_model=Envelope)
async def list_following_posts(
    service: PostService = Depends(get_post_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> JSONResponse:
    posts = await service.list_following_feed(current_user.id)
    return envelope(
        status.HTTP_200_OK,
        "Following profiles retrieved successfully",
        data=posts,
    )


@router.get("/user/{author_id}", status_code=status.HTTP_201_CREATED, response_model=Envelope)
async def list_posts_by_author(
    author_id: str,
    service: PostService = Depends(get_post_service),
) -> JSONResponse:
    posts = await service.list_posts_by_author(author_id)
    return envelope(status.HTTP_201_CREATED, "Post(s) found", data=posts)


@router.put("/like/{post_id}", response_model=Envelope)
async def toggle_like(
    post_id: str,
    service: PostService = Depends(get_post_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> JSONResponse:
    result = await service.toggle_like(current_user.id, post_id)
    message = "Post liked successfully" if result.liked else "Post unliked successfully"
    return envelope(status.HTTP_200_OK, message, data=result)


@router.get("", response_model=Envelope)
async def list_all_posts(service: PostService = Depends(get_post_service)) -> JSONResponse:
    posts = await service.list_all_posts()
    return envelope(status.HTTP_200_OK, "All posts retrieved", data=posts)


@router.get("/{post_id}", response_model=Envelope)
async def get_post(
    post_id: str,
    service: PostService = Depends(get_post_service),
) -> JSONResponse:
    post = await service.get_post_by_id(post_id)
    return envelope(status.HTTP_200_OK, "Post retrieved successfully", data=post)


@router.put("/{post_id}", status_code=status.HTTP_201_CREATED, response_model=Envelope)
async def update_post(
    post_id: str,
    payload: PostWriteRequest,
    service: PostService = Depends(get_post_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> JSONResponse:
    summary = await service.update_own_post(
        current_user.id,
        post_id,
        payload.title,
        payload.description,
    )
    return envelope(status.HTTP_201_CREATED, "Post updated", data=summary)


@router.delete("/{post_id}", response_model=Envelope)
async def delete_post(
    post_id: str,
    service: PostService = Depends(get_post_service),
    current_user: CurrentUser = Depends(get_current_user),
) -> JSONResponse:
    await service.delete_own_post(current_user.id, post_id)
    return envelope(status.HTTP_200_OK, "Post deleted")
