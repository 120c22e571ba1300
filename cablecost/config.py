from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    COMPANY_NAME: str = "Cable Works"
    CURRENCY_SYMBOL: str = "₹"
    LOG_LEVEL: str = "INFO"

    # Quote defaults
    DEFAULT_CABLE_LENGTH: float = 100.0
    DEFAULT_CONDUCTOR_DENSITY: float = 8.96   # copper, g/cm³
    DEFAULT_INSULATION_DENSITY: float = 1.4   # PVC, g/cm³

    # Reprocess stock is priced at this fraction of fresh when no lot price is set
    REPROCESS_PRICE_FACTOR: float = 0.7

    # Resistivity constant for the CR-value area calculator (1 m reference length)
    ALUMINIUM_RESISTIVITY: float = 28.264

    PROFIT_MARGIN_OPTIONS: List[int] = [0, 5, 10, 15, 20, 25, 30]

    class Config:
        env_file = ".env"


settings = Settings()
