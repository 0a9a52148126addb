"""Servidor de desenvolvimento: python -m simuladores.api"""

import os

import uvicorn


def main():
    uvicorn.run(
        "simuladores.api.main:app",
        host=os.getenv("SIMULADORES_HOST", "127.0.0.1"),
        port=int(os.getenv("SIMULADORES_PORT", "8000")),
        reload=os.getenv("SIMULADORES_RELOAD", "false").lower() == "true"
    )


if __name__ == "__main__":
    main()
