"""
API tests for the forecasting routes.

Exercises the HTTP surface with the mock Supabase client: camelCase
request/response bodies, validation and the error payload format.
"""

from tests.factories import CatalogFactory, SeasonalEventFactory


FORECAST_URL = "/api/forecasting/fba-shipments"


# ===================
# FBA SHIPMENTS
# ===================

class TestFbaShipmentsEndpoint:

    def test_forecast_camel_case_round_trip(self, test_client_with_mock_db, mock_supabase):
        CatalogFactory.load(mock_supabase, [CatalogFactory.create(sku="MUG-01", velocity=10)])

        response = test_client_with_mock_db.post(
            FORECAST_URL,
            json={"asOf": "2026-10-18", "daysTarget": 45, "dailyCapacity": 150},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["runId"]
        assert body["parameters"]["asOf"] == "2026-10-18"
        assert body["parameters"]["dailyCapacity"] == 150

        rec = body["recommendations"][0]
        assert rec["masterSku"] == "MUG-01"
        assert rec["neededUnits"] == 450
        assert [b["quantity"] for b in rec["batches"]] == [90, 90, 90]
        assert [b["shipDate"] for b in rec["batches"]] == ["2026-10-18", "2026-11-17", "2026-12-17"]
        assert "baseDemand" in rec["calculationBreakdown"]

        assert len(body["capacityAdjustedShipments"]) == 3
        assert body["summary"]["totalSkus"] == 1
        assert body["summary"]["totalUnitsNeeded"] == 450
        assert body["summary"]["debug"]["total_mappings"] == 1

    def test_empty_body_uses_defaults(self, test_client_with_mock_db, mock_supabase):
        response = test_client_with_mock_db.post(FORECAST_URL)

        assert response.status_code == 200
        params = response.json()["parameters"]
        assert params["daysTarget"] == 45
        assert params["dailyCapacity"] == 100
        assert params["channel"] == "amazon_us"
        assert response.json()["recommendations"] == []

    def test_database_failure_returns_error_payload(self, test_client_with_mock_db, mock_supabase):
        mock_supabase.set_table_error("sku_mappings", Exception("connection refused"))

        response = test_client_with_mock_db.post(FORECAST_URL, json={"asOf": "2026-10-18"})

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "DATABASE_ERROR"
        assert "connection refused" in error["message"]
        assert error["details"]["table"] == "sku_mappings"

    def test_zero_daily_capacity_rejected(self, test_client_with_mock_db):
        response = test_client_with_mock_db.post(FORECAST_URL, json={"dailyCapacity": 0})

        assert response.status_code == 422

    def test_invalid_date_rejected(self, test_client_with_mock_db):
        response = test_client_with_mock_db.post(FORECAST_URL, json={"asOf": "not-a-date"})

        assert response.status_code == 422

    def test_readable_events_applied(self, test_client_with_mock_db, mock_supabase):
        CatalogFactory.load(mock_supabase, [CatalogFactory.create(sku="MUG-01", velocity=10)])
        event = SeasonalEventFactory.create(name="Black Friday", start_month=11, start_day=1)
        event["id"] = 7
        mock_supabase.set_table_data("seasonal_events", [event])

        response = test_client_with_mock_db.post(FORECAST_URL, json={"asOf": "2026-10-18"})

        assert response.status_code == 200
        rec = response.json()["recommendations"][0]
        assert rec["neededUnits"] == 675
        assert rec["calculationBreakdown"]["seasonalityNote"] == "Black Friday coming up (+50%)"

    def test_seasonality_outage_still_forecasts(self, test_client_with_mock_db, mock_supabase):
        CatalogFactory.load(mock_supabase, [CatalogFactory.create(sku="MUG-01", velocity=10)])
        mock_supabase.set_table_error("seasonal_events", Exception("relation does not exist"))

        response = test_client_with_mock_db.post(FORECAST_URL, json={"asOf": "2026-10-18"})

        assert response.status_code == 200
        assert response.json()["recommendations"][0]["neededUnits"] == 450


# ===================
# SEASONALITY
# ===================

class TestSeasonalityEndpoints:

    def test_list_events(self, test_client_with_mock_db, mock_supabase):
        mock_supabase.set_table_data("seasonal_events", [
            SeasonalEventFactory.create(name="Prime Day", learned_multiplier="1.8"),
        ])

        response = test_client_with_mock_db.get("/api/forecasting/seasonality/events")

        assert response.status_code == 200
        event = response.json()["data"][0]
        assert event["name"] == "Prime Day"
        assert event["startMonth"] == 7
        assert event["learnedMultiplier"] == "1.8"

    def test_list_events_unavailable(self, test_client_with_mock_db, mock_supabase):
        mock_supabase.set_table_error("seasonal_events", Exception("relation does not exist"))

        response = test_client_with_mock_db.get("/api/forecasting/seasonality/events")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SEASONALITY_UNAVAILABLE"

    def test_upcoming_within_full_year(self, test_client_with_mock_db, mock_supabase):
        mock_supabase.set_table_data("seasonal_events", [
            SeasonalEventFactory.create(name="Prime Day", start_month=7, start_day=15),
        ])

        response = test_client_with_mock_db.get(
            "/api/forecasting/seasonality/upcoming", params={"days": 366}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["windowDays"] == 366
        assert len(body["data"]) == 1
        assert body["data"][0]["event"]["name"] == "Prime Day"
        assert body["data"][0]["effectiveMultiplier"] == "1.5"

    def test_upcoming_unavailable(self, test_client_with_mock_db, mock_supabase):
        mock_supabase.set_table_error("seasonal_events", Exception("relation does not exist"))

        response = test_client_with_mock_db.get("/api/forecasting/seasonality/upcoming")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SEASONALITY_UNAVAILABLE"

    def test_upcoming_window_validated(self, test_client_with_mock_db):
        response = test_client_with_mock_db.get(
            "/api/forecasting/seasonality/upcoming", params={"days": 0}
        )

        assert response.status_code == 422

    def test_multiplier_for_date(self, test_client_with_mock_db, mock_supabase):
        mock_supabase.set_table_data("seasonal_events", [
            SeasonalEventFactory.create(name="Black Friday", start_month=11, start_day=1),
        ])

        response = test_client_with_mock_db.get(
            "/api/forecasting/seasonality/multiplier", params={"date": "2026-10-18"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["asOf"] == "2026-10-18"
        assert body["lookaheadDays"] == 30
        assert body["multiplier"] == "1.5"
        assert body["eventName"] == "Black Friday"
        assert body["note"] == "Black Friday coming up (+50%)"

    def test_multiplier_falls_back_when_unavailable(self, test_client_with_mock_db, mock_supabase):
        mock_supabase.set_table_error("seasonal_events", Exception("relation does not exist"))

        response = test_client_with_mock_db.get(
            "/api/forecasting/seasonality/multiplier", params={"date": "2026-10-18"}
        )

        assert response.status_code == 200
        assert response.json()["multiplier"] == "1.0"
        assert response.json()["eventName"] is None


# ===================
# HEALTH
# ===================

def test_health_reports_store_counts(test_client_with_mock_db, mock_supabase):
    mock_supabase.set_table_data("sku_mappings", [{"id": "m1"}, {"id": "m2"}])

    response = test_client_with_mock_db.get("/health")

    assert response.status_code == 200
    assert response.json()["database"]["sku_mappings_count"] == 2
    assert response.json()["database"]["products_count"] == 0
