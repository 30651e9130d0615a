"""
Image upload endpoints.

Stores face photographs on local disk and tracks them per user.
"""
import logging
import os
import re
from typing import List, Optional
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from aiface.core import config
from aiface.core.auth_dependency import get_current_user, get_db
from aiface.db.models.image import Image
from aiface.db.models.user import User
from aiface.schemas.image import ImageResponse, MessageResponse
from aiface.services import storage_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])

ALLOWED_IMAGE_TYPES = re.compile(r"jpeg|jpg|png|gif")


def is_allowed_image(filename: str, content_type: Optional[str]) -> bool:
    """Both the extension and the declared media type must look like an image."""
    extension = os.path.splitext(filename or "")[1].lower()
    return bool(
        ALLOWED_IMAGE_TYPES.search(extension)
        and ALLOWED_IMAGE_TYPES.search(content_type or "")
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ImageResponse)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Upload a face photograph (jpeg, jpg, png or gif, max 5MB).
    """
    if image is None or not image.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    if not is_allowed_image(image.filename, image.content_type):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image files are allowed!")

    content = await image.read()
    if len(content) > config.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large (max {config.MAX_UPLOAD_SIZE // (1024 * 1024)}MB)"
        )

    filename, path = storage_service.save_upload(image.filename, content)
    try:
        record = Image(
            user_id=user.id,
            filename=filename,
            original_name=image.filename,
            path=path,
            size=len(content),
            mimetype=image.content_type
        )
        db.add(record)
        db.commit()
        db.refresh(record)
    except Exception as e:
        db.rollback()
        storage_service.delete_file(path)
        logger.error(f"Failed to record upload: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error uploading file"
        )

    logger.info(f"Image uploaded: image_id={record.id}, user_id={user.id}, size={record.size}")
    return ImageResponse.model_validate(record)


@router.get("/my-images", status_code=status.HTTP_200_OK, response_model=List[ImageResponse])
def list_my_images(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the authenticated user's images, newest first."""
    images = (
        db.query(Image)
        .filter(Image.user_id == user.id)
        .order_by(Image.uploaded_at.desc(), Image.id.desc())
        .all()
    )
    return [ImageResponse.model_validate(image) for image in images]


@router.delete("/{image_id}", status_code=status.HTTP_200_OK, response_model=MessageResponse)
def delete_image(
    image_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Delete an image and its stored file.
    
    The image's analysis, if any, is kept.
    """
    image = db.query(Image).filter(Image.id == image_id, Image.user_id == user.id).first()
    if not image:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")

    try:
        storage_service.delete_file(image.path)
        db.delete(image)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete image {image_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error deleting image"
        )

    logger.info(f"Image deleted: image_id={image_id}, user_id={user.id}")
    return MessageResponse(message="Image deleted successfully")
