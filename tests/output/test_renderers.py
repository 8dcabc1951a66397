"""Tests for the op-specific Rich renderers."""

from __future__ import annotations

from payrails.output.console import create_console, get_output, style_for_rail
from payrails.output.renderers import render_result
from payrails.services.result import ServiceError, ServiceResult


def _selection(ranking: list[dict[str, object]]) -> ServiceResult:
    return ServiceResult(
        ok=True,
        op="select_rail",
        data={
            "rail": "Wire (domestic)",
            "rail_type": "wire",
            "score": 88.5,
            "criteria": {"amount": 500000, "urgency": "real-time"},
            "ranking": ranking,
        },
    )


WIRE_ROW = {
    "rail": "Wire (domestic)",
    "rail_type": "wire",
    "score": 88.5,
    "settlement_days": 0,
    "real_time": True,
}
ACH_ROW = {
    "rail": "ACH",
    "rail_type": "ach",
    "score": 70.0,
    "settlement_days": 2,
    "real_time": False,
}


class TestConsole:
    def test_buffer_round_trip(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_rail_styles(self) -> None:
        assert style_for_rail("ach") == "pr.rail.ach"
        assert style_for_rail("unknown") == ""


class TestSelectionRenderer:
    def test_headline(self) -> None:
        out = render_result(_selection([WIRE_ROW]))
        assert "select_rail" in out
        assert "Wire (domestic)" in out
        assert "score 88.50" in out

    def test_single_row_ranking_hidden(self) -> None:
        assert "Settlement" not in render_result(_selection([WIRE_ROW]))

    def test_ranking_table(self) -> None:
        out = render_result(_selection([WIRE_ROW, ACH_ROW]))
        assert "Settlement" in out
        assert "70.00" in out
        assert "2d" in out

    def test_verbose_shows_criteria(self) -> None:
        out = render_result(_selection([WIRE_ROW]), verbose=True)
        assert "criteria:" in out
        assert "urgency: real-time" in out


class TestNachaRenderers:
    def test_file_summary_with_batches(self) -> None:
        result = ServiceResult(
            ok=True,
            op="nacha_inspect",
            data={
                "file_id": "021000021-2610191000A",
                "entry_count": 1,
                "total_credits": "12.34",
                "batches": [
                    {
                        "batch_number": 1,
                        "sec_code": "PPD",
                        "company_name": "PAYRAILS",
                        "entry_description": "PAYROLL",
                        "effective_entry_date": "2026-10-20",
                        "service_class_code": 220,
                        "entry_count": 1,
                        "total_debits": "0.00",
                        "total_credits": "12.34",
                    }
                ],
            },
        )
        out = render_result(result)
        assert "file_id: 021000021-2610191000A" in out
        assert "total_credits: 12.34" in out
        assert "PPD" in out
        assert "PAYROLL" in out

    def test_validate(self) -> None:
        result = ServiceResult(ok=True, op="nacha_validate", data={"valid": True, "problems": []})
        assert "valid: True" in render_result(result)

    def test_roundtrip(self) -> None:
        result = ServiceResult(
            ok=True,
            op="nacha_roundtrip",
            data={"file_id": "F1", "identical": True, "lines": 10, "first_difference": None},
        )
        out = render_result(result)
        assert "identical: True" in out
        assert "lines: 10" in out


class TestGenericAndErrors:
    def test_generic_fields(self) -> None:
        result = ServiceResult(
            ok=True, op="check_routing", data={"routing_number": "021000021", "thrift": False}
        )
        out = render_result(result)
        assert "routing_number: 021000021" in out
        assert "thrift: False" in out

    def test_error_lists_problems(self) -> None:
        result = ServiceResult(
            ok=False,
            op="validate_request",
            error=ServiceError(
                code="RAIL_VALIDATION",
                message="ACH validation failed with 2 error(s)",
                detail={"errors": ["first", "second"], "rail_type": "ach"},
            ),
        )
        out = render_result(result)
        assert "ERROR" in out
        assert "ACH validation failed with 2 error(s)" in out
        assert "  - first" in out
        assert "rail_type" not in out
        assert "rail_type: ach" in render_result(result, verbose=True)

    def test_verbose_telemetry_tree(self) -> None:
        result = ServiceResult(
            ok=True,
            op="check_iban",
            data={},
            meta={
                "telemetry": {
                    "name": "RoutingService.check_iban",
                    "duration_ms": 1.25,
                    "children": [{"name": "parse", "duration_ms": 0.5}],
                }
            },
        )
        out = render_result(result, verbose=True)
        assert "RoutingService.check_iban" in out
        assert "parse" in out
        assert "1.25ms" in out
