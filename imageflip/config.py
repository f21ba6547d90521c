from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _alias(env_name: str, field_name: str) -> AliasChoices:
    """Accept the Functions app-setting name as well as the field name."""
    return AliasChoices(env_name, field_name)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Cosmos DB (task records) ─────────────────────────────────────────────
    cosmos_endpoint: str = Field(
        default="", validation_alias=_alias("CosmosDBEndpoint", "cosmos_endpoint"),
    )
    cosmos_key: str = Field(
        default="", validation_alias=_alias("CosmosDBKey", "cosmos_key"),
    )
    cosmos_database: str = Field(
        default="Images", validation_alias=_alias("CosmosDBDatabase", "cosmos_database"),
    )
    cosmos_container: str = Field(
        default="TaskState", validation_alias=_alias("CosmosDBContainer", "cosmos_container"),
    )
    # Create database + container on startup if they do not exist yet
    cosmos_auto_provision: bool = Field(
        default=True,
        validation_alias=_alias("CosmosDBAutoProvision", "cosmos_auto_provision"),
    )

    # ── Blob storage (source + flipped images) ───────────────────────────────
    storage_connection_string: str = Field(
        default="",
        validation_alias=_alias("AzureWebJobsStorage", "storage_connection_string"),
    )
    blob_container: str = Field(
        default="images", validation_alias=_alias("ContainerName", "blob_container"),
    )

    # ── Processing ───────────────────────────────────────────────────────────
    flipped_suffix: str = Field(
        default="_flipped", validation_alias=_alias("FlippedSuffix", "flipped_suffix"),
    )
    output_format: str = Field(
        default="JPEG", validation_alias=_alias("OutputFormat", "output_format"),
    )
    output_quality: int = Field(
        default=100, ge=1, le=100,
        validation_alias=_alias("OutputQuality", "output_quality"),
    )
    # Off: a mid-flow failure leaves the record "In progress"
    mark_failed_on_error: bool = Field(
        default=False,
        validation_alias=_alias("MarkFailedOnError", "mark_failed_on_error"),
    )

    # ── Logging ──────────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", validation_alias=_alias("LogLevel", "log_level"))

    @property
    def output_content_type(self) -> str:
        return f"image/{self.output_format.lower()}"
