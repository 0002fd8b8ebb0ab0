from fastapi import HTTPException, UploadFile, status


def ensure_image(upload: UploadFile) -> None:
    """التحقق من أن الملف المرفوع صورة."""
    content_type = (upload.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="يجب أن يكون الملف المرفوع صورة.",
        )
