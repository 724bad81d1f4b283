"""
Markdown rendering of audit reports.

Reports are rendered with Jinja2 from built-in templates. A user template
directory can override any of them by file name.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import ChoiceLoader, DictLoader, Environment, FileSystemLoader, TemplateNotFound

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


DEFAULT_TEMPLATES = {
    "duplicates.md.j2": """# Duplicate Code Report

**Workspace:** `{{ report.workspace }}`

{% if not report.success -%}
**Analysis failed:** {{ report.error }}
{%- else -%}
{% if report.truncated %}> Similarity comparisons were stopped early; similar duplicates are incomplete.

{% endif -%}
## Summary

| Metric | Value |
|--------|-------|
| Files found | {{ report.summary.totalFiles | format_number }} |
| Files analyzed | {{ report.summary.analyzedFiles | format_number }} |
| Duplicate groups | {{ report.summary.duplicateBlocks | format_number }} |
| Duplicate lines | {{ report.summary.duplicateLines | format_number }} |
| Duplication | {{ report.summary.duplicatePercentage }}% |
| Affected files | {{ report.summary.affectedFiles | format_number }} |
{% if not summary_only %}
{% if report.exactDuplicates %}
## Exact Duplicates
{% for group in report.exactDuplicates %}
### {{ loop.index }}. {{ group.type }} ({{ group.duplicateLines }} lines)

{% for member in group.members -%}
- `{{ member | location }}`
{% endfor %}
{%- if group.content %}
```
{{ group.content }}
```
{% endif %}
{%- endfor %}
{% endif %}
{% if report.similarDuplicates %}
## Similar Duplicates

| Type | Similarity | Lines | First | Second |
|------|------------|-------|-------|--------|
{% for group in report.similarDuplicates -%}
| {{ group.type }} | {{ group.similarity | percent }} | {{ group.duplicateLines }} | `{{ group.members[0] | location }}` | `{{ group.members[1] | location }}` |
{% endfor %}
{% endif %}
{% endif %}
## Recommendations

{% for item in report.recommendations -%}
- {{ item }}
{% endfor %}
{%- endif %}
""",
    "metrics.md.j2": """# Code Metrics Report

**Workspace:** `{{ report.workspace }}`

{% if not report.success -%}
**Analysis failed:** {{ report.error }}
{%- else -%}
## Summary

| Metric | Value |
|--------|-------|
| Files | {{ report.summary.totalFiles | format_number }} |
| Lines | {{ report.summary.totalLines | format_number }} |
| Code lines | {{ report.summary.totalCodeLines | format_number }} |
| Comment lines | {{ report.summary.totalCommentLines | format_number }} |
| Blank lines | {{ report.summary.totalBlankLines | format_number }} |
| Size | {{ report.summary.totalSizeBytes | format_number }} bytes |
| Large files | {{ report.summary.largeFiles }} |
| Very large files | {{ report.summary.veryLargeFiles }} |
| Functions | {{ report.complexity.totalFunctions | format_number }} |
| Complexity per function | {{ report.complexity.averageComplexity }} |
{% if not summary_only %}
## Languages

| Language | Files | Lines | Code | Comments | Functions | Classes | Avg complexity |
|----------|-------|-------|------|----------|-----------|---------|----------------|
{% for name, stats in report.languages | dictsort -%}
| {{ name }} | {{ stats.files }} | {{ stats.lines | format_number }} | {{ stats.codeLines | format_number }} | {{ stats.commentLines | format_number }} | {{ stats.functions }} | {{ stats.classes }} | {{ stats.averageComplexity }} |
{% endfor %}
{% if report.largeFiles %}
## Large Files

| File | Lines | Size | Reason |
|------|-------|------|--------|
{% for f in report.largeFiles -%}
| `{{ f.path }}` | {{ f.lines | format_number }} | {{ f.sizeKB }}KB | {{ f.reason }} |
{% endfor %}
{% endif %}
{% if report.complexity.highComplexityFiles %}
## High Complexity Files

| File | Complexity | Functions | Severity |
|------|------------|-----------|----------|
{% for f in report.complexity.highComplexityFiles -%}
| `{{ f.path }}` | {{ f.complexity }} | {{ f.functions }} | {{ f.severity }} |
{% endfor %}
{% endif %}
{% endif %}
## Recommendations

{% for item in report.recommendations -%}
- {{ item }}
{% endfor %}
{%- endif %}
""",
}


def _location(member: dict[str, Any]) -> str:
    if "startLine" in member:
        return f"{member['path']}:{member['startLine']}-{member['endLine']}"
    return member["path"]


class TemplateRenderer:
    """
    Render report templates.

    Supports both default templates and custom user templates.
    """

    def __init__(self, custom_template_dir: Path | None = None) -> None:
        """
        Initialize the template renderer.

        Args:
            custom_template_dir: Optional directory with custom templates.
        """
        self.custom_dir = custom_template_dir

        loaders = []
        if custom_template_dir and custom_template_dir.exists():
            loaders.append(FileSystemLoader(str(custom_template_dir)))
        elif custom_template_dir:
            logger.warning("Template directory %s not found, using built-in templates", custom_template_dir)
        loaders.append(DictLoader(DEFAULT_TEMPLATES))

        self.env = Environment(loader=ChoiceLoader(loaders), keep_trailing_newline=True)
        self.env.filters["format_number"] = lambda x: f"{int(x):,}"
        self.env.filters["percent"] = lambda x: f"{x * 100:.1f}%"
        self.env.filters["location"] = _location

    def render(self, template_name: str, **context: Any) -> str:
        """
        Render a template with context.

        Args:
            template_name: Name of the template (e.g., "metrics.md.j2")
            **context: Template context variables.

        Returns:
            Rendered template string.
        """
        template = self.env.get_template(template_name)
        return template.render(**context)

    def has_template(self, template_name: str) -> bool:
        """Check if a template exists."""
        try:
            self.env.get_template(template_name)
            return True
        except TemplateNotFound:
            return False


def render_report(
    kind: str,
    report: dict[str, Any],
    summary_only: bool = False,
    template_dir: Path | None = None,
) -> str:
    """
    Render a report as Markdown.

    Args:
        kind: "duplicates" or "metrics".
        report: Report dictionary from the scanner.
        summary_only: Leave out the per-file sections.
        template_dir: Optional directory with custom templates.

    Returns:
        Markdown text.
    """
    renderer = TemplateRenderer(template_dir)
    return renderer.render(f"{kind}.md.j2", report=report, summary_only=summary_only)


def create_template_dir(output_dir: Path) -> None:
    """
    Create a template directory with the default templates.

    Useful for users who want to customize templates.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    for template_name, content in DEFAULT_TEMPLATES.items():
        with open(output_dir / template_name, "w", encoding="utf-8") as f:
            f.write(content)
