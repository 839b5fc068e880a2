from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the climate service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def add_reading(
        self, room_id: int, temperature: float, humidity: Optional[float] = None
    ) -> None:
        if not self._config.api_key:
            raise typer.BadParameter("An API key is required to add readings (--api-key or BIRD_API_KEY).")

        body: Dict[str, Any] = {"room_id": room_id, "temperature": temperature}
        if humidity is not None:
            body["humidity"] = humidity
        try:
            response = self._client.post(
                "/op/add",
                json=body,
                headers={"x-api-key": self._config.api_key},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)

    def list_rooms(self) -> List[Dict[str, Any]]:
        try:
            response = self._client.get("/rooms")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def query_readings(
        self,
        room_id: Optional[int] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params = {
            key: value
            for key, value in (
                ("room_id", room_id),
                ("start_time", start_time),
                ("end_time", end_time),
            )
            if value is not None
        }
        try:
            response = self._client.get("/temp", params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        data = payload.get("data")
        if not isinstance(data, list):
            raise typer.BadParameter("Unexpected response payload when querying readings.")
        return data

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("details") or data.get("error")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
