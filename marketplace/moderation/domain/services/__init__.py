from .moderation_service import ModerationService


__all__ = ["ModerationService"]
