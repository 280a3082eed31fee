import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_current_user
from app.models.trip import Comment, Trip
from app.models.user import User
from app.schemas.trip import CommentCreate, CommentResponse

router = APIRouter()


@router.get("/trips/{trip_id}", response_model=list[CommentResponse])
async def get_comments_for_trip(trip_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Comment).where(Comment.trip_id == trip_id).order_by(Comment.created_at)
    )
    return [CommentResponse.model_validate(c) for c in result.scalars().all()]


@router.post("", status_code=201, response_model=CommentResponse)
async def create_comment(
    req: CommentCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not await db.get(Trip, req.trip_id):
        raise HTTPException(status_code=404, detail="Trip not found.")

    comment = Comment(trip_id=req.trip_id, author_id=user.id, text=req.text)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return CommentResponse.model_validate(comment)


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
):
    comment = await db.get(Comment, comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found.")
    if comment.author_id != user.id:
        raise HTTPException(status_code=403, detail="Only the author can delete this comment.")
    await db.delete(comment)
    await db.commit()
    return {"message": "Comment deleted successfully"}
