# every model is imported here so SQLAlchemy registers it in Base.metadata

from carmarket.data.models.user import UserModel
from carmarket.data.models.car import CarModel
from carmarket.data.models.car_application import CarApplicationModel
from carmarket.data.models.favorite import FavoriteModel
from carmarket.data.models.message import MessageModel

__all__ = ["UserModel", "CarModel", "CarApplicationModel", "FavoriteModel", "MessageModel"]
