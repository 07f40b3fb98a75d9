from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the ingest service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def upload_document(self, path: Path) -> Dict[str, Any]:
        if not path.is_file():
            raise typer.BadParameter(f"Path {path} is not a file.")

        try:
            response = self._client.post(
                "/measurements",
                content=path.read_bytes(),
                headers={"Content-Type": "application/xml"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        if not isinstance(payload, dict) or "stored" not in payload:
            raise typer.BadParameter("Unexpected response payload when uploading document.")
        return payload

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
