from __future__ import annotations

# Vite (5173) and CRA-style (3000) dev servers for the marketplace frontend.
DEV_ORIGINS = ("http://localhost:3000", "http://localhost:5173")


def _split_origins(value: str | None) -> list[str]:
    return [s.strip().rstrip("/") for s in str(value or "").split(",") if s.strip()]


def build_allowed_origins(
    *,
    frontend_base_url: str | None,
    frontend_url: str | None,
    frontend_urls: str | None,
    include_dev_origins: bool = True,
) -> list[str]:
    origins = set(DEV_ORIGINS) if include_dev_origins else set()
    for value in (frontend_base_url, frontend_url, frontend_urls):
        origins.update(_split_origins(value))
    return sorted(origins)
