from pydantic_settings import BaseSettings, SettingsConfigDict

from airlock.detection.models import PIIType

_DEFAULT_FILE_EXTENSIONS = [
    ".txt", ".md", ".csv", ".tsv", ".json", ".xml", ".html", ".htm", ".log",
    ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".c", ".cpp", ".h",
    ".rb", ".go", ".rs", ".swift", ".yaml", ".yml",
]


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    detect_name: bool = True
    detect_phone: bool = True
    detect_email: bool = True
    detect_address: bool = True
    detect_mynumber: bool = True
    detect_dob: bool = True
    dob_context_required: bool = False

    airlock_folder_name: str = "airlock"
    file_extensions: list[str] = list(_DEFAULT_FILE_EXTENSIONS)
    structural_extensions: list[str] = [".yaml", ".yml"]
    text_encoding: str = "utf-8"

    def enabled_types(self) -> dict[PIIType, bool]:
        """Per-category detection toggles, keyed by PII type."""
        return {
            PIIType.NAME: self.detect_name,
            PIIType.PHONE: self.detect_phone,
            PIIType.EMAIL: self.detect_email,
            PIIType.ADDRESS: self.detect_address,
            PIIType.MYNUMBER: self.detect_mynumber,
            PIIType.DOB: self.detect_dob,
        }
