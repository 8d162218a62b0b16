from airlock.anonymization.anonymizer import Anonymizer
from airlock.anonymization.exceptions import AnonymizationError
from airlock.anonymization.models import AnonymizationResult

__all__ = ["AnonymizationError", "AnonymizationResult", "Anonymizer"]
