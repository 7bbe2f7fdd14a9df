"""SQLAlchemy models for database schema."""

# Import all models here to ensure they are registered with Base.metadata

from .topic_model import DocumentTopic, TopicAffinity, TopicCoherence, TopicNgram, TopicWord

__all__ = [
    "DocumentTopic",
    "TopicAffinity",
    "TopicCoherence",
    "TopicNgram",
    "TopicWord",
]
