"""
Lance l'API Perdami Store avec uvicorn.

Usage:
    python -m backend

Variables d'environnement:
- PORT: port d'écoute (défaut 8000)
- UVICORN_RELOAD: reload auto en dev ("1"/"true"/"yes")
- LOG_LEVEL: niveau de logs uvicorn (défaut "info")
"""
import os
import uvicorn

def main() -> None:
    uvicorn.run(
        "backend.asgi:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 8000)),
        reload=os.environ.get("UVICORN_RELOAD", "").lower() in ("1", "true", "yes"),
        log_level=os.environ.get("LOG_LEVEL", "info"),
    )

if __name__ == "__main__":
    main()
