from __future__ import annotations

from contextlib import ExitStack
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the energy impact service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def upload_summary(
        self,
        records: Path,
        devices: Optional[Path] = None,
        previous: Optional[Path] = None,
        top_n: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict[str, Any]:
        data: Dict[str, str] = {}
        if top_n is not None:
            data["top_n"] = str(top_n)
        if start is not None:
            data["start_date"] = start.isoformat()
        if end is not None:
            data["end_date"] = end.isoformat()
        return self._upload(
            "/consumption/summary/upload",
            {"records": records, "devices": devices, "previous": previous},
            data,
        )

    def upload_impact_comparison(
        self,
        records: Path,
        devices: Optional[Path] = None,
        granularity: str = "month",
        reference: Optional[date] = None,
    ) -> Dict[str, Any]:
        data = {"granularity": granularity}
        if reference is not None:
            data["reference_date"] = reference.isoformat()
        return self._upload(
            "/impact/comparison/upload",
            {"records": records, "devices": devices},
            data,
        )

    def get_periods(self, granularity: str, reference: Optional[date] = None) -> Dict[str, Any]:
        params = {"reference": reference.isoformat()} if reference is not None else {}
        try:
            response = self._client.get(f"/periods/{granularity}", params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def _upload(
        self,
        url: str,
        paths: Dict[str, Optional[Path]],
        data: Dict[str, str],
    ) -> Dict[str, Any]:
        for path in paths.values():
            if path is None:
                continue
            if not path.exists():
                raise typer.BadParameter(f"File {path} does not exist.")
            if not path.is_file():
                raise typer.BadParameter(f"Path {path} is not a file.")

        try:
            with ExitStack() as stack:
                files = {
                    field: (path.name, stack.enter_context(path.open("rb")), "text/csv")
                    for field, path in paths.items()
                    if path is not None
                }
                response = self._client.post(url, files=files, data=data)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: Any = None
        try:
            detail = exc.response.json().get("detail")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
