from flask_marshmallow import Marshmallow
from flask_session import Session


ma = Marshmallow()

# Server-side sessions, stored in the same Redis as the read-through cache.
sess = Session()
