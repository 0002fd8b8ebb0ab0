class WatermarkError(Exception):
    """الخطأ الأساسي لكل عمليات العلامة المائية."""


class DecodeError(WatermarkError):
    """البيانات المصدرية ليست صورة يمكن قراءتها."""


class CompositeError(WatermarkError):
    """فشل دمج طبقة العلامة المائية مع الصورة."""


class EncodeError(WatermarkError):
    """فشل إعادة ترميز الصورة بعد الدمج."""


class NetworkError(WatermarkError):
    """فشل جلب الصورة من الرابط البعيد (مهلة، رمز حالة غير ناجح، أو انقطاع)."""


class RemoteHostNotAllowedError(NetworkError):
    """المضيف غير موجود في قائمة المضيفين المسموح بهم."""
