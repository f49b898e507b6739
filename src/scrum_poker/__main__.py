"""Run the Scrum Poker server with uvicorn."""

import uvicorn

from .config import settings


def main() -> None:
    uvicorn.run(
        "scrum_poker.main:socket_app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
