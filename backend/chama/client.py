"""
HTTP client and contribution board for the Chama Tracker API.

``ContributionsClient`` is a thin async wrapper over the REST endpoints.
``ContributionBoard`` keeps the records shown for one year: it ranks them by
computed total, applies single-month edits locally after the server accepts
them, and renders the PDF and Excel reports from what it currently holds.

Usage:
    async with ContributionsClient("http://localhost:5000") as client:
        board = ContributionBoard(client, year=2024)
        await board.refresh()
        await board.edit_month(board.records[0]["id"], "march", 500)
"""
import logging
from typing import Any, Optional

import httpx

from chama.core.config import settings
from chama.core.periods import current_year, normalize_month
from chama.services.exports import render_pdf, render_xlsx
from chama.services.reports import Record, replace_record, sort_by_total

logger = logging.getLogger(__name__)


class ContributionsClient:
    """Async client for the /api endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}{settings.API_PREFIX}",
            timeout=timeout or settings.REQUEST_TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "ContributionsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        response = await self._client.request(method, path, **kwargs)
        response.raise_for_status()
        return response.json()

    # Members

    async def list_members(self) -> list[dict]:
        return await self._request("GET", "/members")

    async def get_member(self, member_id: str) -> dict:
        return await self._request("GET", f"/members/{member_id}")

    async def create_member(self, name: str, phone: Optional[str] = None, email: Optional[str] = None) -> dict:
        payload = {"name": name, "phone": phone, "email": email}
        return await self._request("POST", "/members", json=payload)

    async def update_member(self, member_id: str, **fields) -> dict:
        return await self._request("PUT", f"/members/{member_id}", json=fields)

    async def delete_member(self, member_id: str) -> dict:
        return await self._request("DELETE", f"/members/{member_id}")

    # Contributions

    async def list_contributions(self, year: Optional[int] = None) -> list[dict]:
        params = {"year": year} if year else None
        return await self._request("GET", "/contributions", params=params)

    async def list_contributions_by_year(self, year: int) -> list[dict]:
        return await self._request("GET", f"/contributions/{year}")

    async def list_member_contributions(self, member_id: str, year: Optional[int] = None) -> list[dict]:
        params = {"year": year} if year else None
        return await self._request("GET", f"/contributions/member/{member_id}", params=params)

    async def update_month(
        self,
        member_id: str,
        month: str,
        amount: Optional[float],
        year: Optional[int] = None
    ) -> dict:
        return await self._request(
            "PUT",
            f"/contributions/member/{member_id}/month/{month}",
            json={"amount": amount, "year": year},
        )

    async def update_contribution(self, contribution_id: str, **fields) -> dict:
        return await self._request("PUT", f"/contributions/{contribution_id}", json=fields)


class ContributionBoard:
    """
    The records displayed for one year, ranked by computed total.

    Failed requests never change ``records``; list failures are kept in
    ``error`` and ``refresh()`` can simply be called again.
    """

    def __init__(self, client: ContributionsClient, year: Optional[int] = None):
        self.client = client
        self.year = year or current_year()
        self.records: list[Record] = []
        self.error: Optional[str] = None

    async def refresh(self) -> bool:
        """Reload the year's records. Returns False (and sets ``error``) on failure."""
        try:
            data = await self.client.list_contributions_by_year(self.year)
        except httpx.HTTPError as exc:
            self.error = f"Failed to load contributions: {exc}"
            logger.warning(self.error)
            return False

        self.records = sort_by_total(data)
        self.error = None
        return True

    async def select_year(self, year: int) -> bool:
        self.year = year
        return await self.refresh()

    def find(self, record_id: str) -> Optional[Record]:
        return next((r for r in self.records if r.get("id") == record_id), None)

    async def edit_month(self, record_id: str, month: str, amount: Optional[float]) -> Record:
        """
        Set one month of a displayed record through the API and apply the result.

        Raises KeyError for an unknown record, InvalidInputError for a bad
        month name and httpx errors when the server rejects the change.
        """
        record = self.find(record_id)
        if record is None:
            raise KeyError(record_id)

        member_id = record.get("member_id") or (record.get("member") or {}).get("id")
        updated = await self.client.update_month(
            member_id,
            normalize_month(month),
            amount if amount is not None else 0,
            record.get("year") or self.year,
        )
        self.records = replace_record(self.records, updated)
        return updated

    def pdf(self, group_name: Optional[str] = None) -> bytes:
        return render_pdf(self.records, self.year, group_name or settings.GROUP_NAME)

    def excel(self) -> bytes:
        return render_xlsx(self.records, self.year)
