from flask import Blueprint

bp = Blueprint("api", __name__)

from . import feedback  # noqa: E402,F401
from . import health  # noqa: E402,F401
