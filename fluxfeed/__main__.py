"""Run the signal API: python -m fluxfeed"""

import uvicorn
from dotenv import load_dotenv


def main() -> None:
    load_dotenv()

    from fluxfeed.domain.config import get_config

    config = get_config()
    uvicorn.run(
        "fluxfeed.services.signals.app:app",
        host=config.host,
        port=config.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
