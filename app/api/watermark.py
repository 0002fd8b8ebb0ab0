from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from app.core.exceptions import NetworkError, RemoteHostNotAllowedError
from app.core.logging import configure_logging
from app.models import (
    Anchor,
    EligibilityResponse,
    InlineWatermarkRequest,
    RemoteWatermarkRequest,
    WatermarkOptions,
    WatermarkResponse,
)
from app.services.policy import should_apply_watermark
from app.services.watermark_service import WatermarkService
from app.utils.data_url import mime_type_for, to_inline
from app.utils.file_utils import ensure_image

router = APIRouter(prefix="/image/watermark", tags=["Image Watermark"])

logger = configure_logging()
watermark_service = WatermarkService()


@router.post("/inline", summary="تطبيق العلامة المائية على صورة بصيغة data URL")
async def watermark_inline(payload: InlineWatermarkRequest) -> WatermarkResponse:
    image = await run_in_threadpool(watermark_service.watermark_inline, payload.image, payload.options)
    return WatermarkResponse(image=image)


@router.post("/remote", summary="جلب صورة من رابط وتطبيق العلامة المائية عليها")
async def watermark_remote(payload: RemoteWatermarkRequest) -> WatermarkResponse:
    try:
        image = await watermark_service.watermark_remote(payload.url, payload.options)
    except RemoteHostNotAllowedError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="نطاق رابط الصورة غير مسموح به.",
        ) from exc
    except NetworkError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="تعذر جلب الصورة من الرابط المحدد.",
        ) from exc

    logger.info("تم تطبيق العلامة المائية على صورة من %s", payload.url)
    return WatermarkResponse(image=image)


@router.post("/upload", summary="رفع صورة وتطبيق العلامة المائية عليها")
async def watermark_upload(
    file: UploadFile = File(...),
    text: str = Form("Piktor"),
    anchor: Anchor = Form(Anchor.bottom_left),
    font_size: float = Form(40),
    opacity: float = Form(0.6),
    padding: float = Form(30),
) -> WatermarkResponse:
    ensure_image(file)
    source = await file.read()
    options = WatermarkOptions(
        text=text,
        anchor=anchor,
        font_size=font_size,
        opacity=opacity,
        padding=padding,
    )

    outcome = await run_in_threadpool(watermark_service.render, source, options)
    if outcome.ok:
        image = to_inline(outcome.data, outcome.mime_type)
    else:
        logger.warning("فشل تطبيق العلامة المائية على %s: %s", file.filename, outcome.error)
        image = to_inline(source, file.content_type or mime_type_for(None))

    logger.info("تمت معالجة الصورة المرفوعة: %s", file.filename)
    return WatermarkResponse(image=image)


@router.get("/eligibility/{plan_id}", summary="هل تخضع الخطة للعلامة المائية؟")
async def eligibility(plan_id: str) -> EligibilityResponse:
    return EligibilityResponse(plan_id=plan_id, apply_watermark=should_apply_watermark(plan_id))
