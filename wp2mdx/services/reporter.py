"""Export reports (text / markdown / JSON) built from validation results."""

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union

from wp2mdx.models.options import ExportReportOptions
from wp2mdx.models.report import (
    ContentTypeStats,
    ExportItem,
    ExportReport,
    MessageGroup,
    ReportDetails,
    ReportMetadata,
    ReportSummary,
)
from wp2mdx.models.results import ValidationResult

logger = logging.getLogger(__name__)

REPORT_VERSION = "1.0.0"

RULE = "=" * 80
SUBRULE = "-" * 40


def _group_messages(results: List[ValidationResult], attr: str) -> List[MessageGroup]:
    """Group messages by their prefix (text before the first colon)."""
    groups: Dict[str, MessageGroup] = {}
    for result in results:
        label = f"{result.metadata.title} ({result.metadata.slug})"
        for message in getattr(result, attr):
            key = message.split(":")[0] or message
            group = groups.setdefault(key, MessageGroup(type=key, message=key, count=0))
            group.count += 1
            group.items.append(label)
    return list(groups.values())


def generate_export_report(
    results: List[ValidationResult], options: Optional[ExportReportOptions] = None
) -> ExportReport:
    opts = options or ExportReportOptions()
    start = time.perf_counter()

    total = len(results)
    successful = sum(1 for r in results if r.valid)

    content_types: Dict[str, ContentTypeStats] = {}
    details = ReportDetails()
    for result in results:
        meta = result.metadata
        stats = content_types.setdefault(meta.content_type or "unknown", ContentTypeStats())
        stats.total += 1
        if result.valid:
            stats.successful += 1
        else:
            stats.failed += 1
        stats.errors += len(result.errors)
        stats.warnings += len(result.warnings)

        item = ExportItem(
            title=meta.title or "",
            slug=meta.slug or "",
            type=meta.content_type or "unknown",
            status="success" if result.valid else "failed",
            errors=list(result.errors),
            warnings=list(result.warnings),
            processing_time=meta.validation_time,
            checks_performed=list(meta.checks_performed),
        )
        (details.successful if result.valid else details.failed).append(item)

    details.errors = _group_messages(results, "errors")
    details.warnings = _group_messages(results, "warnings")

    summary = ReportSummary(
        total=total,
        successful=successful,
        failed=total - successful,
        success_rate=successful / total * 100 if total else 0.0,
        total_errors=sum(len(r.errors) for r in results),
        total_warnings=sum(len(r.warnings) for r in results),
        processing_time=round((time.perf_counter() - start) * 1000, 3),
        content_types=content_types,
    )

    return ExportReport(
        summary=summary,
        details=details,
        metadata=ReportMetadata(
            generated_at=datetime.now(timezone.utc).isoformat(),
            version=REPORT_VERSION,
            options=opts,
        ),
    )


def _generated(report: ExportReport) -> str:
    try:
        return datetime.fromisoformat(report.metadata.generated_at).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return report.metadata.generated_at


def _by_count(groups: List[MessageGroup]) -> List[MessageGroup]:
    return sorted(groups, key=lambda group: group.count, reverse=True)


def _text_groups(title: str, groups: List[MessageGroup]) -> List[str]:
    lines = [title, SUBRULE]
    for group in _by_count(groups):
        lines.append(f"{group.type} ({group.count} occurrences):")
        lines.extend(f"  - {item}" for item in group.items[:5])
        if len(group.items) > 5:
            lines.append(f"  ... and {len(group.items) - 5} more")
        lines.append("")
    return lines


def format_report_as_text(report: ExportReport) -> str:
    summary = report.summary
    details = report.details
    opts = report.metadata.options

    lines = [
        RULE,
        "CONTENT EXPORT REPORT",
        RULE,
        f"Generated: {_generated(report)}",
        f"Version: {report.metadata.version}",
        "",
        "SUMMARY",
        SUBRULE,
        f"Total Items: {summary.total}",
        f"Successful: {summary.successful}",
        f"Failed: {summary.failed}",
        f"Success Rate: {summary.success_rate:.1f}%",
        f"Total Errors: {summary.total_errors}",
        f"Total Warnings: {summary.total_warnings}",
    ]
    if opts.include_timing:
        lines.append(f"Processing Time: {summary.processing_time:.0f}ms")
    lines.append("")

    if opts.group_by_type:
        lines.extend(["CONTENT TYPES", SUBRULE])
        for content_type, stats in summary.content_types.items():
            lines.extend(
                [
                    f"{content_type.upper()}:",
                    f"  Total: {stats.total}",
                    f"  Successful: {stats.successful}",
                    f"  Failed: {stats.failed}",
                    f"  Errors: {stats.errors}",
                    f"  Warnings: {stats.warnings}",
                    "",
                ]
            )

    if details.errors:
        lines.extend(_text_groups("ERROR SUMMARY", details.errors))
    if details.warnings and opts.include_warnings:
        lines.extend(_text_groups("WARNING SUMMARY", details.warnings))

    if opts.include_details and details.failed:
        lines.extend(["FAILED ITEMS", SUBRULE])
        for index, item in enumerate(details.failed, start=1):
            lines.append(f"{index}. {item.title} ({item.type})")
            lines.append(f"   Slug: {item.slug}")
            if opts.include_timing:
                lines.append(f"   Processing Time: {item.processing_time:.0f}ms")
            lines.append(f"   Checks Performed: {', '.join(item.checks_performed)}")
            if item.errors:
                lines.append(f"   Errors ({len(item.errors)}):")
                lines.extend(f"     - {error}" for error in item.errors)
            if item.warnings and opts.include_warnings:
                lines.append(f"   Warnings ({len(item.warnings)}):")
                lines.extend(f"     - {warning}" for warning in item.warnings)
            lines.append("")

    if opts.include_details and details.successful:
        lines.extend(["SUCCESSFUL ITEMS", SUBRULE, f"Total: {len(details.successful)} items", ""])
        for index, item in enumerate(details.successful[:10], start=1):
            lines.append(f"{index}. {item.title} ({item.type}) - {item.slug}")
        if len(details.successful) > 10:
            lines.append(f"... and {len(details.successful) - 10} more")

    lines.extend(["", RULE, "END OF REPORT", RULE])
    return "\n".join(lines)


def _markdown_groups(title: str, groups: List[MessageGroup]) -> List[str]:
    lines = [f"## {title}", ""]
    for group in _by_count(groups):
        lines.append(f"### {group.type} ({group.count} occurrences)")
        lines.append("")
        lines.extend(f"- {item}" for item in group.items[:10])
        if len(group.items) > 10:
            lines.append(f"- ... and {len(group.items) - 10} more")
        lines.append("")
    return lines


def format_report_as_markdown(report: ExportReport) -> str:
    summary = report.summary
    details = report.details
    opts = report.metadata.options

    lines = [
        "# Content Export Report",
        "",
        f"**Generated:** {_generated(report)}",
        f"**Version:** {report.metadata.version}",
        "",
        "## Summary",
        "",
        "| Metric | Value |",
        "|--------|-------|",
        f"| Total Items | {summary.total} |",
        f"| Successful | {summary.successful} |",
        f"| Failed | {summary.failed} |",
        f"| Success Rate | {summary.success_rate:.1f}% |",
        f"| Total Errors | {summary.total_errors} |",
        f"| Total Warnings | {summary.total_warnings} |",
    ]
    if opts.include_timing:
        lines.append(f"| Processing Time | {summary.processing_time:.0f}ms |")
    lines.append("")

    if opts.group_by_type:
        lines.extend(
            [
                "## Content Types",
                "",
                "| Type | Total | Successful | Failed | Errors | Warnings |",
                "|------|-------|------------|--------|--------|----------|",
            ]
        )
        for content_type, stats in summary.content_types.items():
            lines.append(
                f"| {content_type} | {stats.total} | {stats.successful} | {stats.failed} "
                f"| {stats.errors} | {stats.warnings} |"
            )
        lines.append("")

    if details.errors:
        lines.extend(_markdown_groups("Error Summary", details.errors))
    if details.warnings and opts.include_warnings:
        lines.extend(_markdown_groups("Warning Summary", details.warnings))

    if opts.include_details and details.failed:
        lines.extend(["## Failed Items", ""])
        for index, item in enumerate(details.failed, start=1):
            lines.extend([f"### {index}. {item.title} ({item.type})", "", f"- **Slug:** {item.slug}"])
            if opts.include_timing:
                lines.append(f"- **Processing Time:** {item.processing_time:.0f}ms")
            lines.extend([f"- **Checks Performed:** {', '.join(item.checks_performed)}", ""])
            if item.errors:
                lines.extend(["**Errors:**", ""])
                lines.extend(f"- {error}" for error in item.errors)
                lines.append("")
            if item.warnings and opts.include_warnings:
                lines.extend(["**Warnings:**", ""])
                lines.extend(f"- {warning}" for warning in item.warnings)
                lines.append("")

    if opts.include_details and details.successful:
        lines.extend(
            [
                "## Successful Items",
                "",
                f"**Total:** {len(details.successful)} items",
                "",
                "| Title | Type | Slug |",
                "|-------|------|------|",
            ]
        )
        lines.extend(f"| {item.title} | {item.type} | {item.slug} |" for item in details.successful)

    return "\n".join(lines)


def render_export_report(report: ExportReport, fmt: Optional[str] = None) -> str:
    fmt = fmt or report.metadata.options.format
    if fmt == "json":
        return report.model_dump_json(indent=2)
    if fmt == "markdown":
        return format_report_as_markdown(report)
    return format_report_as_text(report)


def save_export_report(report: ExportReport, path: Union[str, Path], fmt: Optional[str] = None) -> Path:
    target = Path(path)
    target.write_text(render_export_report(report, fmt), encoding="utf-8")
    logger.info("Export report written to %s", target)
    return target


def generate_quick_summary(results: List[ValidationResult]) -> str:
    total = len(results)
    successful = sum(1 for r in results if r.valid)
    rate = successful / total * 100 if total else 0.0
    errors = sum(len(r.errors) for r in results)
    warnings = sum(len(r.warnings) for r in results)
    return (
        f"Export Summary: {successful}/{total} successful ({rate:.1f}%), "
        f"{errors} errors, {warnings} warnings"
    )
