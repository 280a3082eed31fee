import uuid

from sqlalchemy import Float, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base, PortableJSON


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    google_place_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(500))
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)
    types: Mapped[list] = mapped_column(PortableJSON, default=list)
    image: Mapped[str | None] = mapped_column(String(500))
