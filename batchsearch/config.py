"""
batchsearch/config.py — Centralized configuration
Loads .env and exposes typed settings throughout the app.
"""
import os
from pathlib import Path


def _load_dotenv(path: str = ".env"):
    p = Path(path)
    if not p.exists():
        return
    for line in p.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        k, _, v = line.partition("=")
        k = k.strip(); v = v.strip().strip('"').strip("'")
        if k and k not in os.environ:
            os.environ[k] = v


_load_dotenv()


def parse_listen_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port`` (``:8080`` means every interface) into its parts."""
    host, sep, port = addr.rpartition(":")
    if not sep:
        raise ValueError(f"LISTEN_ADDR must look like host:port, got {addr!r}")
    try:
        port_num = int(port)
    except ValueError as exc:
        raise ValueError(f"LISTEN_ADDR port must be an integer, got {port!r}") from exc
    return host.strip("[]") or "0.0.0.0", port_num


class Config:
    """
    Process-wide settings, built once at startup and handed to create_app().
    Request handling never reads the environment itself.
    """

    def __init__(self, environ: dict | None = None):
        env = os.environ if environ is None else environ

        # Search API
        self.RAPIDAPI_KEY: str = env.get("RAPIDAPI_KEY", "")

        # Output
        self.OUTPUT_DIR: str = env.get("OUTPUT_DIR", ".") or "."

        # Server
        self.LISTEN_ADDR: str = env.get("LISTEN_ADDR", "") or ":8080"
        self.DEBUG: bool      = env.get("DEBUG", "false").lower() == "true"

        # CORS
        self.CORS_ORIGINS: list[str] = [
            o.strip()
            for o in env.get("CORS_ORIGINS", "http://localhost:8080").split(",")
            if o.strip()
        ]

    @property
    def HOST(self) -> str:
        return parse_listen_addr(self.LISTEN_ADDR)[0]

    @property
    def PORT(self) -> int:
        return parse_listen_addr(self.LISTEN_ADDR)[1]

    def validate(self):
        errors = []
        if not self.RAPIDAPI_KEY:
            errors.append("RAPIDAPI_KEY must be provided")
        try:
            parse_listen_addr(self.LISTEN_ADDR)
        except ValueError as e:
            errors.append(str(e))
        if errors:
            raise EnvironmentError("Config errors:\n" + "\n".join(f"  • {e}" for e in errors))
