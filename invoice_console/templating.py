from pathlib import Path

from fastapi.templating import Jinja2Templates

from .config import settings
from .services.formatting import format_inr, format_quantity
from .services.number_words import amount_in_words

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
templates.env.filters["inr"] = format_inr
templates.env.filters["qty"] = format_quantity
templates.env.filters["in_words"] = amount_in_words
templates.env.globals["currency"] = settings.currency_symbol
