from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./print_pricing.db"
    COMPANY_NAME: str = "Gang Run Printing"
    LOG_LEVEL: str = "INFO"

    # Custom quantities above the step must be whole multiples of it
    CUSTOM_QUANTITY_STEP: int = 5000
    # Custom sizes are cut in quarter-inch steps
    CUSTOM_SIZE_INCREMENT: float = 0.25
    # lb per square inch, used when a paper stock has no weight on file
    DEFAULT_PAPER_WEIGHT_PER_SQ_IN: float = 0.0009

    # Seed the standard catalog on startup
    AUTO_SEED: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
