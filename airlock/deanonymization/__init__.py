from airlock.deanonymization.deanonymizer import Deanonymizer
from airlock.deanonymization.models import PlaceholderInfo

__all__ = ["Deanonymizer", "PlaceholderInfo"]
