from sqlalchemy import Column, Integer, String, Text, Boolean


class ListingFieldsMixin:
    """Descriptive columns shared by a published car and a submitted application."""

    name = Column(String, nullable=False)
    image_url = Column(String, nullable=True)
    price = Column(Integer, nullable=False)
    max_speed = Column(Integer, nullable=False)
    acceleration = Column(String, nullable=False)
    drive = Column(String, nullable=False)
    category = Column(String, nullable=False)  # standard, sport, coupe, suv, motorcycle
    server = Column(String, nullable=False)  # arbat, patriki, rublevka, tverskoy
    server_id = Column(String, nullable=True)

    phone = Column(String, nullable=True)
    telegram = Column(String, nullable=True)
    discord = Column(String, nullable=True)

    description = Column(Text, nullable=True)
    is_premium = Column(Boolean, nullable=False, default=False)


LISTING_FIELDS = (
    "name",
    "image_url",
    "price",
    "max_speed",
    "acceleration",
    "drive",
    "category",
    "server",
    "server_id",
    "phone",
    "telegram",
    "discord",
    "description",
    "is_premium",
)
