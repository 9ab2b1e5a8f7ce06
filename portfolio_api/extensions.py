from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_socketio import SocketIO

from .database import MongoGateway

mongo = MongoGateway()
cors = CORS()
socketio = SocketIO()

# Key: the socket peer. Behind a trusted proxy, PROXY_FIX_HOPS makes ProxyFix
# rewrite remote_addr first; raw X-Forwarded-For is never trusted here.
# Storage is configured in create_app() via limiter.init_app(...).
limiter = Limiter(key_func=get_remote_address)
