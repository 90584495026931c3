"""Report sinks."""

from browserlens.reporting.sink import (
    COMPREHENSIVE_REPORT_NAME,
    JsonReportSink,
    ReportSink,
    build_comprehensive_report,
    build_session_report,
    session_report_name,
)

__all__ = [
    "COMPREHENSIVE_REPORT_NAME",
    "JsonReportSink",
    "ReportSink",
    "build_comprehensive_report",
    "build_session_report",
    "session_report_name",
]
