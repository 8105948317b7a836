from flask_cors import CORS
from flask_marshmallow import Marshmallow
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

cors = CORS()
ma = Marshmallow()
limiter = Limiter(key_func=get_remote_address, default_limits=["200 per minute"])
