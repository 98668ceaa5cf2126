from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "FinanceReports"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_TRANSACTIONS_TABLE: str = Field(
        default="finance-transactions",
        validation_alias="DYNAMO_TABLE_TRANSACTIONS",
    )

    # Report defaults
    DEFAULT_TREND_MONTHS: int = 6
    MAX_TREND_MONTHS: int = 60
    TOP_CATEGORY_LIMIT: int = 5

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
