"""Run the API server.

Usage:
    python -m studysphere
"""
import uvicorn

from studysphere import config


def main() -> None:
    uvicorn.run("studysphere.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
