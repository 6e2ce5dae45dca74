# This file makes the 'data_access' directory a Python package.
# It also makes it easier to import repositories from other modules.

from .user_repository import user_repo
from .car_repository import car_repo
