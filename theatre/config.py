# theatre/config.py
from decouple import config

MONGO_URI = config("MONGO_URI", default="mongodb://localhost:27017")
MONGO_DB = config("MONGO_DB", default="theatre_booking")

SECRET_KEY = config("SECRET_KEY", default="change-me-in-production")
ALGORITHM = config("ALGORITHM", default="HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = config("ACCESS_TOKEN_EXPIRE_MINUTES", default=30, cast=int)

# Share of seats drawn as available when a seat map is generated
SEAT_AVAILABILITY = config("SEAT_AVAILABILITY", default=0.7, cast=float)

LOG_LEVEL = config("LOG_LEVEL", default="INFO")
LOG_JSON = config("LOG_JSON", default=True, cast=bool)

# Insert the default shows when the shows collection is empty
SEED_CATALOG = config("SEED_CATALOG", default=True, cast=bool)
