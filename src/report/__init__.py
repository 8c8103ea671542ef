"""Report models and rendering."""

from report.models import CheckReport, GraphReport
from report.write import (
    build_check_report,
    build_graph_report,
    dumps_json,
    format_edge_list,
    format_issue_text,
)

__all__ = [
    "CheckReport",
    "GraphReport",
    "build_check_report",
    "build_graph_report",
    "dumps_json",
    "format_edge_list",
    "format_issue_text",
]
