"""
Tests for Contribution API endpoints.
"""
from types import SimpleNamespace

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from chama.core.periods import MONTHS, current_year
from chama.models.contribution import Contribution
from chama.services.contributions import ensure_contribution


async def set_month(client: AsyncClient, member_id: str, month: str, amount, year=None):
    payload = {"amount": amount}
    if year is not None:
        payload["year"] = year
    return await client.put(
        f"/api/contributions/member/{member_id}/month/{month}", json=payload
    )


class TestMonthUpsert:
    """Test setting a single month through upsert-by-month."""

    @pytest.mark.asyncio
    async def test_jane_doe_scenario(self, client: AsyncClient):
        """Test create, set march, then replace march."""
        response = await client.post("/api/members", json={"name": "Jane Doe"})
        member_id = response.json()["id"]
        year = current_year()

        response = await set_month(client, member_id, "march", 500, year)
        assert response.status_code == 200
        first = response.json()
        assert first["march"] == 500
        assert first["total"] == 500
        assert first["member"]["name"] == "Jane Doe"

        response = await set_month(client, member_id, "march", 750, year)
        assert response.status_code == 200
        second = response.json()
        assert second["id"] == first["id"]
        assert second["march"] == 750
        assert second["total"] == 750

    @pytest.mark.asyncio
    async def test_repeated_call_is_idempotent(
        self, client: AsyncClient, db_session, test_member
    ):
        """Test the same call twice gives one record and no double counting."""
        first = (await set_month(client, test_member.id, "april", 300, 2024)).json()
        second = (await set_month(client, test_member.id, "april", 300, 2024)).json()

        assert first["id"] == second["id"]
        assert second["april"] == 300
        assert second["total"] == 300

        count = await db_session.scalar(
            select(func.count()).select_from(Contribution).where(
                Contribution.member_id == test_member.id,
                Contribution.year == 2024
            )
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_unseen_year_creates_one_record(self, client: AsyncClient, test_member):
        """Test a new year gets exactly one record with only the target month set."""
        response = await set_month(client, test_member.id, "october", 250, 2019)
        assert response.status_code == 200
        data = response.json()
        assert data["year"] == 2019
        assert data["october"] == 250
        assert data["total"] == 250
        assert all(data[m] == 0 for m in MONTHS if m != "october")

        response = await client.get(
            f"/api/contributions/member/{test_member.id}", params={"year": 2019}
        )
        assert len(response.json()) == 1

    @pytest.mark.asyncio
    async def test_total_tracks_all_months(self, client: AsyncClient, test_member):
        """Test total equals the sum of months after several updates."""
        amounts = {"january": 100, "may": 250.5, "december": 49.5}
        data = None
        for month, amount in amounts.items():
            data = (await set_month(client, test_member.id, month, amount)).json()

        assert data["total"] == sum(data[m] for m in MONTHS)
        assert data["total"] == 400

    @pytest.mark.asyncio
    async def test_missing_year_defaults_to_current(self, client: AsyncClient, test_member):
        """Test year falls back to the current year when omitted or falsy."""
        response = await set_month(client, test_member.id, "july", 10)
        assert response.json()["year"] == current_year()

        response = await set_month(client, test_member.id, "july", 20, 0)
        assert response.status_code == 200
        assert response.json()["year"] == current_year()
        assert response.json()["july"] == 20

    @pytest.mark.asyncio
    async def test_missing_amount_resets_month(self, client: AsyncClient, test_member):
        """Test an omitted amount replaces the month with zero."""
        await set_month(client, test_member.id, "august", 90)
        response = await client.put(
            f"/api/contributions/member/{test_member.id}/month/august", json={}
        )
        assert response.status_code == 200
        assert response.json()["august"] == 0
        assert response.json()["total"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("month", ["January", "january", "JANUARY"])
    async def test_month_is_case_insensitive(self, client: AsyncClient, test_member, month):
        """Test month names normalize to the same field."""
        response = await set_month(client, test_member.id, month, 40)
        assert response.status_code == 200
        assert response.json()["january"] == 40

    @pytest.mark.asyncio
    @pytest.mark.parametrize("month", ["jan", "13th-month"])
    async def test_invalid_month_rejected(self, client: AsyncClient, test_member, month):
        """Test non-canonical month names are a client error."""
        response = await set_month(client, test_member.id, month, 40)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid month"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("year", [1999, 2101, "abc"])
    async def test_invalid_year_rejected(self, client: AsyncClient, test_member, year):
        """Test out-of-range or non-numeric years are a client error."""
        response = await set_month(client, test_member.id, "may", 40, year)
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("year", [2000, 2100])
    async def test_boundary_years_accepted(self, client: AsyncClient, test_member, year):
        """Test the year range is inclusive."""
        response = await set_month(client, test_member.id, "may", 40, year)
        assert response.status_code == 200
        assert response.json()["year"] == year

    @pytest.mark.asyncio
    async def test_unknown_member_not_found(self, client: AsyncClient):
        """Test creating a record for a missing member returns 404."""
        response = await set_month(client, "doesnotexist123", "may", 40)
        assert response.status_code == 404
        assert response.json()["detail"] == "Member not found"


class TestContributionQueries:
    """Test the year and member listing endpoints."""

    @pytest.mark.asyncio
    async def test_list_by_year_defaults_to_current(
        self, client: AsyncClient, test_member, second_member
    ):
        """Test listing without a year returns current-year records with member data."""
        response = await client.get("/api/contributions")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 2
        assert {r["member"]["name"] for r in data} == {"John Doe", "Alice Achieng"}
        assert all(r["year"] == current_year() for r in data)

    @pytest.mark.asyncio
    async def test_list_empty_year(self, client: AsyncClient, test_member):
        """Test a year with no records returns an empty list."""
        response = await client.get("/api/contributions", params={"year": 2005})
        assert response.status_code == 200
        assert response.json() == []

        response = await client.get("/api/contributions/2005")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_by_path_year_sorted_by_member_name(
        self, client: AsyncClient, test_member, second_member
    ):
        """Test the path-year listing is ordered by member name."""
        response = await client.get(f"/api/contributions/{current_year()}")
        assert response.status_code == 200
        names = [r["member"]["name"] for r in response.json()]
        assert names == ["Alice Achieng", "John Doe"]

    @pytest.mark.asyncio
    async def test_list_by_member_sorted_by_year_desc(self, client: AsyncClient, test_member):
        """Test member listing returns newest year first."""
        await set_month(client, test_member.id, "may", 1, 2010)
        await set_month(client, test_member.id, "may", 1, 2015)

        response = await client.get(f"/api/contributions/member/{test_member.id}")
        years = [r["year"] for r in response.json()]
        assert years == sorted(years, reverse=True)
        assert 2010 in years and 2015 in years

        response = await client.get(
            f"/api/contributions/member/{test_member.id}", params={"year": 2010}
        )
        assert [r["year"] for r in response.json()] == [2010]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("year", ["1999", "2101", "abc"])
    async def test_invalid_year_rejected_everywhere(
        self, client: AsyncClient, test_member, year
    ):
        """Test each listing endpoint rejects a bad year with 400."""
        response = await client.get("/api/contributions", params={"year": year})
        assert response.status_code == 400

        response = await client.get(f"/api/contributions/{year}")
        assert response.status_code == 400

        response = await client.get(
            f"/api/contributions/member/{test_member.id}", params={"year": year}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("year", ["2000", "2100"])
    async def test_boundary_years_listed(self, client: AsyncClient, year):
        """Test boundary years are valid for listing."""
        response = await client.get(f"/api/contributions/{year}")
        assert response.status_code == 200


class TestContributionUpdate:
    """Test overwriting a record by id."""

    @pytest.mark.asyncio
    async def test_update_recomputes_total(self, client: AsyncClient, test_member):
        """Test provided months are written and total is recomputed."""
        record = (await client.get(f"/api/contributions/member/{test_member.id}")).json()[0]

        response = await client.put(
            f"/api/contributions/{record['id']}",
            json={"february": 200, "november": 300, "total": 99999}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["february"] == 200
        assert data["november"] == 300
        assert data["total"] == 500
        assert data["member"]["id"] == test_member.id

    @pytest.mark.asyncio
    async def test_update_keeps_untouched_months(self, client: AsyncClient, test_member):
        """Test months not in the body keep their values."""
        await set_month(client, test_member.id, "march", 70)
        record = (await client.get(f"/api/contributions/member/{test_member.id}")).json()[0]

        response = await client.put(f"/api/contributions/{record['id']}", json={"april": 30})
        data = response.json()
        assert data["march"] == 70
        assert data["april"] == 30
        assert data["total"] == 100

    @pytest.mark.asyncio
    async def test_update_not_found(self, client: AsyncClient):
        """Test updating a missing record returns 404."""
        response = await client.put("/api/contributions/doesnotexist123", json={"may": 1})
        assert response.status_code == 404
        assert response.json()["detail"] == "Contribution not found"

    @pytest.mark.asyncio
    async def test_update_invalid_year(self, client: AsyncClient, test_member):
        """Test a bad year in the body is rejected."""
        record = (await client.get(f"/api/contributions/member/{test_member.id}")).json()[0]
        response = await client.put(f"/api/contributions/{record['id']}", json={"year": 1999})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_year_conflict(self, client: AsyncClient, test_member):
        """Test moving a record onto an existing member/year pair is refused."""
        await set_month(client, test_member.id, "may", 5, 2020)
        record = (await client.get(
            f"/api/contributions/member/{test_member.id}", params={"year": current_year()}
        )).json()[0]

        response = await client.put(f"/api/contributions/{record['id']}", json={"year": 2020})
        assert response.status_code == 409


class TestNonFiniteAmounts:
    """Test NaN and Infinity are rejected before reaching the store."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["NaN", "Infinity", "-Infinity"])
    async def test_month_amount_must_be_finite(self, client: AsyncClient, test_member, raw):
        """Test a non-finite amount is a validation error and changes nothing."""
        await set_month(client, test_member.id, "may", 40)

        response = await client.put(
            f"/api/contributions/member/{test_member.id}/month/may",
            content=f'{{"amount": {raw}}}',
            headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 422

        records = (await client.get(f"/api/contributions/member/{test_member.id}")).json()
        assert records[0]["may"] == 40
        assert records[0]["total"] == 40

    @pytest.mark.asyncio
    async def test_update_months_must_be_finite(self, client: AsyncClient, test_member):
        """Test a non-finite month in an update by id is a validation error."""
        record = (await client.get(f"/api/contributions/member/{test_member.id}")).json()[0]

        response = await client.put(
            f"/api/contributions/{record['id']}",
            content='{"june": NaN, "july": 10}',
            headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 422


class TestEnsureContribution:
    """Test the insert-or-ignore step directly."""

    @pytest.mark.asyncio
    async def test_ensure_is_idempotent(self, db_session, test_member):
        """Test ensuring an existing (member, year) does not add a row."""
        await ensure_contribution(db_session, test_member.id, 2030)
        await ensure_contribution(db_session, test_member.id, 2030)

        count = await db_session.scalar(
            select(func.count()).select_from(Contribution).where(
                Contribution.member_id == test_member.id,
                Contribution.year == 2030
            )
        )
        assert count == 1

    @pytest.mark.asyncio
    async def test_unsupported_dialect_raises(self):
        """Test databases without insert-or-ignore support are refused."""
        bind = SimpleNamespace(dialect=SimpleNamespace(name="mssql"))
        db = SimpleNamespace(get_bind=lambda: bind)

        with pytest.raises(NotImplementedError, match="mssql"):
            await ensure_contribution(db, "member123", 2024)
