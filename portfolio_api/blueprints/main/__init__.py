from flask import Blueprint

bp = Blueprint("main", __name__)

# Importing is what registers the routes
from . import routes  # noqa: E402,F401
