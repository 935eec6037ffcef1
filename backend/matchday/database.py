from databases import Database

from matchday.config import config

database = Database(str(config.pg_dsn))
