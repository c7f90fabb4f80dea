"""HTML rendering for composed pages using Jinja2.

``SECTION_TEMPLATES`` is the single map from content variant to template.
Every caller (server-rendered pages, the JSON API's optional HTML, previews)
goes through ``SectionRenderer``, whichever source loaded the data.
"""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from sitecms.schemas.sections import ComposedPage, SectionContent

TEMPLATE_DIR = Path(__file__).parent / "templates"

SECTION_TEMPLATES: dict[str, str] = {
    "hero": "sections/hero.html",
    "features": "sections/features.html",
    "media": "sections/media.html",
    "pricing": "sections/pricing.html",
    "faq": "sections/faq.html",
    "form": "sections/form.html",
    "html": "sections/html.html",
    "generic": "sections/generic.html",
    "placeholder": "sections/placeholder.html",
}

SECTION_ERROR_MESSAGE = "This section could not be displayed."


class SectionRenderer:
    """Renders section variants and whole pages to HTML."""

    def __init__(self) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=True,
        )

    def render_section(self, content: SectionContent, section_id: int | None = None) -> str:
        template = self.env.get_template(SECTION_TEMPLATES[content.type])
        return template.render(content=content, section_id=section_id)

    def render_section_error(self, section_id: int, section_type: str) -> str:
        template = self.env.get_template("sections/error.html")
        return template.render(
            section_id=section_id,
            section_type=section_type,
            message=SECTION_ERROR_MESSAGE,
        )

    def render_page(
        self,
        page: ComposedPage,
        site_name: str = "Website",
        footer_company_name: str = "Your Company",
    ) -> str:
        """Wrap the page's pre-rendered sections (or its state message) in the layout."""
        template = self.env.get_template("page.html")
        return template.render(
            page=page,
            site_name=site_name,
            footer_company_name=footer_company_name,
        )
