"""
Plain-text report formatter.

The layout is fixed so the text can be pasted as-is into platform abuse
report forms. Empty list sections keep their header with no lines under it.
"""

from myjellybean.schemas.analysis import AnalysisResult

REPORT_TITLE = "MYJELLYBEAN REPORT SUMMARY"
REPORT_RULE = "-" * 29
REPORT_FOOTER = "Generated by MyJellyBean"


def format_report(result: AnalysisResult) -> str:
    """Render the shareable report for one analysis result."""
    summary = result.report_summary

    lines = [
        REPORT_TITLE,
        REPORT_RULE,
        f"CATEGORY: {result.category.value.upper()}",
        f"RISK SCORE: {result.risk_score}/100",
        "",
        "WHAT HAPPENED:",
        summary.what_happened,
        "",
        "WHY IT'S RISKY:",
        *(f"- {item}" for item in summary.why_risky),
        "",
        "MY NEXT STEPS:",
        *(f"- {item}" for item in summary.next_steps),
        "",
        "EVIDENCE CHECKLIST:",
        *(f"- [ ] {item}" for item in summary.evidence_checklist),
        "",
        REPORT_FOOTER,
    ]
    return "\n".join(lines)
