"""
Shared Jinja2 template environment with pt-BR formatting filters.
"""
import os
from fastapi.templating import Jinja2Templates
from app.core.utils import format_brl, format_percent

# Using absolute path to ensure it works regardless of where python is run
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")

templates = Jinja2Templates(directory=TEMPLATES_DIR)
templates.env.filters["brl"] = format_brl
templates.env.filters["percent"] = format_percent
