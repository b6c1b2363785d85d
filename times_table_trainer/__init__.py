"""Times table trainer: a conversational multiplication drill."""

TRAINER_VERSION = "1.2.0"

__all__ = ["TRAINER_VERSION"]
