"""Markdown digest post rendering using a Jinja2 template."""

from jinja2 import Environment, PackageLoader, StrictUndefined

from daily_digest.data_model.models import Material
from daily_digest.llm.models import DailySummary
from daily_digest.renderer import constants as labels
from daily_digest.renderer.citations import (
    build_reference_label,
    escape_md,
    make_biblio_line,
    render_refs,
)


def escape_yaml_double_quoted(value: str) -> str:
    """Escape a value for a double-quoted YAML scalar."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def build_synopsis(daily: DailySummary) -> str:
    """Short description for the post's front matter.

    Prefers up to 2 important titles, then up to 3 overview titles, then
    a fixed generic line.
    """
    important_titles = [
        escape_md(item.title) for item in daily.important[:2] if escape_md(item.title)
    ]
    if important_titles:
        return labels.SYNOPSIS_IMPORTANT.format(
            titles=labels.SYNOPSIS_SEPARATOR.join(important_titles)
        )

    overview_titles = [
        escape_md(item.title) for item in daily.overview[:3] if escape_md(item.title)
    ]
    if overview_titles:
        return labels.SYNOPSIS_OVERVIEW.format(
            titles=labels.SYNOPSIS_SEPARATOR.join(overview_titles)
        )

    return labels.SYNOPSIS_FALLBACK


class DigestDocumentBuilder:
    """Builds the digest post: front matter, important items, overview
    items and the numbered reference list.

    Citation markers are rendered only for ref ids that match a material.
    """

    def __init__(self, post_time: str = "08:00:00") -> None:
        """Initialize the builder.

        Args:
            post_time: Publish time (HH:MM:SS) written into the front matter.
        """
        self._post_time = post_time
        # Output is Markdown with pre-escaped HTML fragments
        self._env = Environment(
            loader=PackageLoader("daily_digest.renderer", "templates"),
            autoescape=False,  # noqa: S701
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def build(
        self,
        run_date: str,
        daily: DailySummary,
        materials: list[Material],
    ) -> str:
        """Render the digest document.

        Args:
            run_date: Run date (YYYY-MM-DD).
            daily: Normalized daily summary.
            materials: Final materials, in ref id order.

        Returns:
            Markdown document text.
        """
        materials_by_id = {material.ref_id: material for material in materials}

        important = [
            {
                "title": escape_md(item.title),
                "summary": escape_md(item.summary),
                "cites": render_refs(item.refs, materials_by_id),
                "reason": escape_md(item.importance_reason)
                or labels.DEFAULT_IMPORTANCE_REASON,
            }
            for item in daily.important
        ]
        overview = [
            {
                "title": escape_md(item.title),
                "summary": escape_md(item.summary),
                "cites": render_refs(item.refs, materials_by_id),
            }
            for item in daily.overview
        ]
        references = [
            make_biblio_line(
                material.ref_id,
                material.link,
                build_reference_label(
                    material, daily.ref_translations.get(material.ref_id)
                ),
            )
            for material in materials
        ]

        template = self._env.get_template("digest.md.j2")
        return template.render(
            title=f"{labels.TITLE_PREFIX} · {run_date}",
            run_date=run_date,
            post_time=self._post_time,
            description=escape_yaml_double_quoted(build_synopsis(daily)),
            category=labels.CATEGORY,
            tags=", ".join(labels.TAGS),
            notice=escape_md(daily.notice),
            headings={
                "important": labels.HEADING_IMPORTANT,
                "overview": labels.HEADING_OVERVIEW,
                "references": labels.HEADING_REFERENCES,
            },
            empty={
                "important": labels.EMPTY_IMPORTANT,
                "overview": labels.EMPTY_OVERVIEW,
            },
            importance_prefix=labels.IMPORTANCE_PREFIX,
            important=important,
            overview=overview,
            references=references,
        )
