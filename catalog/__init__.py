# LocateW Catalog Package
# =======================
# Database file locations and the statistics sidecar.

from catalog.paths import (
    DATABASE_ENV, default_database_path, statistics_path, staging_path, dirlist_path,
)
from catalog.statistics import Statistics, DatabaseMissingError
