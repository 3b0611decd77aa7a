"""Configuration utilities.

Central place to load environment driven settings (Amadeus credentials, mock switch, report path).
Avoids scattering os.getenv calls around the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env once on module import
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


@dataclass(slots=True)
class Settings:
    amadeus_client_id: str | None = os.getenv("AMADEUS_CLIENT_ID")
    amadeus_client_secret: str | None = os.getenv("AMADEUS_CLIENT_SECRET")
    amadeus_base_url: str = os.getenv("AMADEUS_BASE_URL", "https://test.api.amadeus.com")
    use_mock_data: bool = _env_flag("USE_MOCK_DATA")
    currency_code: str = os.getenv("CURRENCY_CODE", "USD")
    max_results: int = int(os.getenv("MAX_RESULTS", "50"))
    output_html: Path = Path(os.getenv("OUTPUT_HTML", "flights.html"))

    def credentials_configured(self) -> bool:
        return all([self.amadeus_client_id, self.amadeus_client_secret])


settings = Settings()
