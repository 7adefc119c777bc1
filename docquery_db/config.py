from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    default_per_page: int = 20
    id_field: str = "_id"

    model_config = SettingsConfigDict(env_prefix="DOCQUERY_")

settings = Settings()
