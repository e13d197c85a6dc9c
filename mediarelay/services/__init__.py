"""Publishing and dispatch services."""

from .dispatcher import MessageDispatcher
from .models import PublishResult, ReplyPublishError
from .publishing_service import MediaThreadPublisher, truncate_title

__all__ = [
    "MediaThreadPublisher",
    "MessageDispatcher",
    "PublishResult",
    "ReplyPublishError",
    "truncate_title",
]
