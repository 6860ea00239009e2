from apiwiki.models.models import ImageRecord, TopicRecord

__all__ = ["ImageRecord", "TopicRecord"]
