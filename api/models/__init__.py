# Models module
from .source import SourceModel, SourceConfig, SourceTypeEnum, SourceStatusEnum
from .article import RawArticle, ArticleModel, CategoryModel
from .fetch_log import FetchLogModel, FetchStatusEnum, FetchResult
from .alert import (
    AlertRuleModel,
    NotificationModel,
    NotificationChannelEnum,
    NotificationStatusEnum
)

__all__ = [
    "SourceModel",
    "SourceConfig",
    "SourceTypeEnum",
    "SourceStatusEnum",
    "RawArticle",
    "ArticleModel",
    "CategoryModel",
    "FetchLogModel",
    "FetchStatusEnum",
    "FetchResult",
    "AlertRuleModel",
    "NotificationModel",
    "NotificationChannelEnum",
    "NotificationStatusEnum"
]
