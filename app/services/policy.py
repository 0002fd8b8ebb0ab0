FREE_PLAN_ID = "free"


def should_apply_watermark(plan_id: str) -> bool:
    """العلامة المائية تُطبَّق على الخطة المجانية فقط."""
    return plan_id == FREE_PLAN_ID
