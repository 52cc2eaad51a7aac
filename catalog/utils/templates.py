from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def format_price(value: Any) -> str:
    """Render a price with two decimals, e.g. ``1.5`` -> ``1.50``."""
    if value is None or value == "":
        return "0.00"
    try:
        return f"{Decimal(str(value)):.2f}"
    except ArithmeticError:
        return str(value)


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M:%S")


class TemplateRenderer:
    """
    Narrow rendering interface used by the route handlers.

    Handlers pass a template name and a view model; HTML is produced only by
    the Jinja2 templates.
    """

    def __init__(self, app_name: str, debug: bool = False, directory: Path = TEMPLATES_DIR):
        self.templates = Jinja2Templates(directory=str(directory))
        self.templates.env.filters["price"] = format_price
        self.templates.env.filters["timestamp"] = format_timestamp
        self.templates.env.globals["app_name"] = app_name
        self.templates.env.globals["current_year"] = lambda: datetime.now().year
        self.debug = debug

    def render(
        self,
        request: Request,
        template_name: str,
        context: Optional[dict] = None,
        status_code: int = 200,
    ) -> HTMLResponse:
        return self.templates.TemplateResponse(
            request,
            template_name,
            context or {},
            status_code=status_code,
        )


def get_renderer(request: Request) -> TemplateRenderer:
    """Dependency returning the application's template renderer."""
    return request.app.state.renderer
